"""
Service description model

A JSON-RPC service describes itself through the ``system.describe`` procedure.
The reply is parsed into a ServiceDescription, which indexes procedures by
(name, arity): overloading by parameter count is supported, overloading by
parameter type is not.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from seam_jsonrpc.errors import MalformedDescriptionError, ProcedureNotFoundError

JSON_RPC_VERSION = "1.1"


@dataclass(frozen=True)
class ParameterDescription:
    """A single declared parameter"""
    name: str
    type: str = "any"

    @classmethod
    def from_dict(cls, raw: Any) -> "ParameterDescription":
        if not isinstance(raw, Mapping):
            raise MalformedDescriptionError(f"Parameter description must be an object: {raw!r}")
        name = raw.get("name")
        if not isinstance(name, str):
            raise MalformedDescriptionError(f"Parameter name missing or not a string: {raw!r}")
        type_tag = raw.get("type", "any")
        if not isinstance(type_tag, str):
            raise MalformedDescriptionError(f"Parameter type must be a string: {raw!r}")
        return cls(name=name, type=type_tag)

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type}


@dataclass(frozen=True)
class ProcedureDescription:
    """A remote procedure: name, ordered parameters and return type"""
    name: str
    params: Tuple[ParameterDescription, ...] = ()
    return_type: str = "any"
    summary: Optional[str] = None
    help: Optional[str] = None
    idempotent: bool = False

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def param_types(self) -> List[str]:
        return [param.type for param in self.params]

    @classmethod
    def from_dict(cls, raw: Any) -> "ProcedureDescription":
        """Parse one entry of the ``procs`` list

        Raises:
            MalformedDescriptionError: ``name`` or ``params`` absent or mistyped
        """
        if not isinstance(raw, Mapping):
            raise MalformedDescriptionError(f"Procedure description must be an object: {raw!r}")
        name = raw.get("name")
        if not isinstance(name, str):
            raise MalformedDescriptionError(f"Procedure name missing or not a string: {raw!r}")
        params = raw.get("params")
        if not isinstance(params, list):
            raise MalformedDescriptionError(f"Procedure {name} has no params list")

        # "return" is either a bare type tag or a parameter-like object
        ret = raw.get("return", "any")
        if isinstance(ret, Mapping):
            ret = ret.get("type", "any")
        if not isinstance(ret, str):
            raise MalformedDescriptionError(f"Procedure {name} has an invalid return type: {ret!r}")

        return cls(
            name=name,
            params=tuple(ParameterDescription.from_dict(p) for p in params),
            return_type=ret,
            summary=raw.get("summary"),
            help=raw.get("help"),
            idempotent=bool(raw.get("idempotent", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "params": [param.to_dict() for param in self.params],
            "return": self.return_type,
            "idempotent": self.idempotent,
        }
        if self.summary is not None:
            data["summary"] = self.summary
        if self.help is not None:
            data["help"] = self.help
        return data


@dataclass(frozen=True)
class ServiceDescription:
    """Self-reported catalogue of a remote service's procedures"""
    name: Optional[str] = None
    version: Optional[str] = None
    id: Optional[str] = None
    summary: Optional[str] = None
    help: Optional[str] = None
    procedures: Mapping[Tuple[str, int], ProcedureDescription] = field(default_factory=dict)

    def __post_init__(self):
        # read-only view, shared across threads without locking
        object.__setattr__(self, "procedures", MappingProxyType(dict(self.procedures)))

    @classmethod
    def from_dict(cls, raw: Any) -> "ServiceDescription":
        """Build a description from a decoded ``system.describe`` result

        Args:
            raw: Mapping with a ``procs`` list

        Raises:
            MalformedDescriptionError: If the mapping is not a valid description
        """
        if not isinstance(raw, Mapping):
            raise MalformedDescriptionError(f"Service description must be an object, got {type(raw).__name__}")
        procs = raw.get("procs")
        if not isinstance(procs, list):
            raise MalformedDescriptionError("Service description has no procs list")

        procedures = {}
        for entry in procs:
            proc = ProcedureDescription.from_dict(entry)
            procedures[(proc.name, proc.arity)] = proc

        return cls(
            name=raw.get("name"),
            version=raw.get("version"),
            id=raw.get("id"),
            summary=raw.get("summary"),
            help=raw.get("help"),
            procedures=procedures,
        )

    @property
    def procs(self) -> List[ProcedureDescription]:
        return list(self.procedures.values())

    def get_procedure(self, name: str, arity: int) -> ProcedureDescription:
        """Look up a procedure by exact name and parameter count

        Raises:
            ProcedureNotFoundError: No procedure matches both
        """
        try:
            return self.procedures[(name, arity)]
        except KeyError:
            raise ProcedureNotFoundError(name, arity) from None

    def has_procedure(self, name: str, arity: int) -> bool:
        return (name, arity) in self.procedures

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "sdversion": "1.0",
            "name": self.name,
            "id": self.id,
            "version": self.version,
            "procs": [proc.to_dict() for proc in self.procs],
        }
        if self.summary is not None:
            data["summary"] = self.summary
        if self.help is not None:
            data["help"] = self.help
        return data
