"""
Typed field paths: dotted paths into entity models, checked against the model schema.

A FieldPath is parsed once and validated against the model class when a rule is
registered. Reads and writes walk pydantic attributes and plain dict keys.
"""

import inspect
from typing import Any, Dict, Optional, Tuple, Type, Union, get_args, get_origin

from pydantic import BaseModel


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) is Union:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_model(annotation: Any) -> bool:
    return inspect.isclass(annotation) and issubclass(annotation, BaseModel)


def _is_open_mapping(annotation: Any) -> bool:
    """dict-like or Any: any nested key is acceptable."""
    return annotation is Any or annotation is dict or get_origin(annotation) is dict


def _field_annotation(model_cls: Type[BaseModel], name: str) -> Tuple[bool, bool, Any]:
    """(exists, writable, annotation) for one attribute of a model class."""
    if name in model_cls.model_fields:
        return True, True, model_cls.model_fields[name].annotation
    if name in model_cls.model_computed_fields:
        return True, False, model_cls.model_computed_fields[name].return_type
    return False, False, None


class FieldPath:
    """A parsed dotted path such as 'engagement.engagement_rate'."""

    def __init__(self, path: str):
        if not path or any(not p for p in path.split(".")):
            raise ValueError(f"Invalid field path: {path!r}")
        self.raw = path
        self.parts: Tuple[str, ...] = tuple(path.split("."))

    def __repr__(self) -> str:
        return f"FieldPath({self.raw!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FieldPath) and other.parts == self.parts

    def __hash__(self) -> int:
        return hash(self.parts)

    def _walk_schema(self, model_cls: Type[BaseModel]) -> Tuple[bool, bool]:
        """(resolvable, writable) for this path on model_cls."""
        annotation: Any = model_cls
        writable = True
        for index, part in enumerate(self.parts):
            annotation = _unwrap_optional(annotation)
            if _is_open_mapping(annotation):
                return True, writable
            if not _is_model(annotation):
                return False, False
            exists, field_writable, annotation = _field_annotation(annotation, part)
            if not exists:
                return False, False
            writable = writable and field_writable
        return True, writable

    def exists_on(self, model_cls: Type[BaseModel]) -> bool:
        return self._walk_schema(model_cls)[0]

    def writable_on(self, model_cls: Type[BaseModel]) -> bool:
        return all(self._walk_schema(model_cls))

    def get(self, entity: Any) -> Any:
        """Value at the path, or MISSING when any segment is absent."""
        current = entity
        for part in self.parts:
            if isinstance(current, BaseModel):
                current = getattr(current, part, MISSING)
            elif isinstance(current, dict):
                current = current.get(part, MISSING)
            else:
                return MISSING
            if current is MISSING:
                return MISSING
        return current

    def set(self, entity: BaseModel, value: Any) -> None:
        """
        Set the value in place, creating intermediate dicts as needed.

        Callers pass a copy; raises ValueError when a segment is not settable.
        """
        current: Any = entity
        for part in self.parts[:-1]:
            if isinstance(current, BaseModel):
                child = getattr(current, part, None)
                if child is None:
                    child = {}
                    setattr(current, part, child)
            elif isinstance(current, dict):
                child = current.setdefault(part, {})
            else:
                raise ValueError(f"Cannot descend into {part!r} of {self.raw}")
            current = child
        last = self.parts[-1]
        if isinstance(current, BaseModel):
            setattr(current, last, value)
        elif isinstance(current, dict):
            current[last] = value
        else:
            raise ValueError(f"Cannot set {self.raw}")


def lookup(
    path: FieldPath,
    entity: BaseModel,
    context: Optional[Dict[str, Any]] = None,
) -> Any:
    """Entity value at path; falls back to context[path.raw] when the entity has None or nothing."""
    value = path.get(entity)
    if value is MISSING or value is None:
        return (context or {}).get(path.raw)
    return value
