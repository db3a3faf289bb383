"""Partner Center JSON ↔ dataclass transformations.

Partner Center speaks camelCase JSON; the DTOs in
``partnercenter.core.api.models`` use snake_case attributes. This module maps
between the two in both directions.

Usage:
    # JSON → DTO
    order = PayloadTransformer.from_payload(Order, resp.json())

    # DTO → JSON
    body = PayloadTransformer.to_payload(CreateOrderRequest(...))

Rules:
    - Field ``foo_bar`` maps to key ``fooBar`` unless the field carries
      ``metadata={"json": "..."}`` or the class sets ``_payload_case = "snake"``.
    - ``None`` values are dropped when serializing.
    - Unknown keys are ignored and missing keys keep the field default.
    - Parametrized generic dataclasses (``PartnerCenterResponse[Order]``)
      resolve their type variables while deserializing.
"""
from __future__ import annotations
import dataclasses
import re
import typing
from typing import Any, Dict, Optional, TypeVar, Union

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class PayloadTransformer:
    """Bidirectional transformer for Partner Center payloads."""

    @staticmethod
    def to_camel(name: str) -> str:
        """Convert ``line_item_number`` to ``lineItemNumber``."""
        head, *rest = name.split("_")
        return head + "".join(part[:1].upper() + part[1:] for part in rest)

    @staticmethod
    def to_snake(name: str) -> str:
        """Convert ``lineItemNumber`` to ``line_item_number``."""
        return _CAMEL_BOUNDARY.sub("_", name).lower()

    @classmethod
    def json_key(cls, owner: type, field: dataclasses.Field) -> str:
        """Return the JSON key used for a dataclass field."""
        if "json" in field.metadata:
            return field.metadata["json"]
        if getattr(owner, "_payload_case", "camel") == "snake":
            return field.name
        return cls.to_camel(field.name)

    @classmethod
    def to_payload(cls, obj: Any) -> Any:
        """Serialize a DTO (or a list/dict of them) into JSON-ready data.

        Args:
            obj: Dataclass instance, list, dict or scalar

        Returns:
            Plain Python structure suitable for ``json.dumps``
        """
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            payload: Dict[str, Any] = {}
            for field in dataclasses.fields(obj):
                value = getattr(obj, field.name)
                if value is None:
                    continue
                payload[cls.json_key(type(obj), field)] = cls.to_payload(value)
            return payload
        if isinstance(obj, (list, tuple)):
            return [cls.to_payload(item) for item in obj]
        if isinstance(obj, dict):
            return {key: cls.to_payload(value) for key, value in obj.items()}
        return obj

    @classmethod
    def from_payload(cls, target: Any, data: Any, typevars: Optional[Dict[Any, Any]] = None) -> Any:
        """Deserialize JSON data into ``target``.

        Args:
            target: Dataclass type, parametrized generic, ``List[...]``,
                ``Optional[...]`` or scalar type
            data: Decoded JSON value
            typevars: Type variable bindings of the enclosing generic

        Returns:
            Instance of ``target`` (or the raw value for scalars)
        """
        if data is None:
            return None
        typevars = typevars or {}

        if isinstance(target, TypeVar):
            return cls.from_payload(typevars.get(target, Any), data, typevars)
        if target is Any:
            return data

        origin = typing.get_origin(target)
        args = typing.get_args(target)

        if origin is Union:
            candidates = [arg for arg in args if arg is not type(None)]
            return cls.from_payload(candidates[0], data, typevars) if candidates else data
        if origin in (list, tuple):
            item_type = args[0] if args else Any
            return [cls.from_payload(item_type, item, typevars) for item in data]
        if origin is dict:
            return dict(data)

        # Parametrized generic dataclass, e.g. PartnerCenterResponse[Order]
        if origin is not None and dataclasses.is_dataclass(origin):
            params = getattr(origin, "__parameters__", ())
            bound = {param: typevars.get(arg, arg) if isinstance(arg, TypeVar) else arg
                     for param, arg in zip(params, args)}
            return cls._build_dataclass(origin, data, bound)

        if dataclasses.is_dataclass(target):
            return cls._build_dataclass(target, data, typevars)

        return data

    @classmethod
    def _build_dataclass(cls, target: type, data: Any, typevars: Dict[Any, Any]) -> Any:
        if not isinstance(data, dict):
            raise TypeError(f"Expected JSON object for {target.__name__}, got {type(data).__name__}")
        hints = typing.get_type_hints(target)
        kwargs = {}
        for field in dataclasses.fields(target):
            if not field.init:
                continue
            key = cls.json_key(target, field)
            if key in data:
                kwargs[field.name] = cls.from_payload(hints.get(field.name, Any), data[key], typevars)
        return target(**kwargs)
