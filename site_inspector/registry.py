"""Inspector registry — command name to inspector function, with typed arguments."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Argument:
    name: str
    default: Any
    kind: Callable[[str], Any] = int
    limit: Any = None

    def convert(self, raw: str | None) -> Any:
        """Convert a raw positional; absent, unparseable or out-of-range values give the default."""
        if raw is None:
            return self.default
        try:
            value = self.kind(raw.strip())
        except (TypeError, ValueError, OverflowError):
            value = None
        if value is None or (self.limit is not None and abs(value) > self.limit):
            logger.warning("Invalid %s %r, using default %r", self.name, raw, self.default)
            return self.default
        return value


@dataclass(frozen=True)
class InspectorSpec:
    name: str
    description: str
    func: Callable
    arguments: tuple[Argument, ...] = field(default_factory=tuple)

    def bind(self, raw_args: Sequence[str]) -> dict[str, Any]:
        bound = {}
        for i, argument in enumerate(self.arguments):
            raw = raw_args[i] if i < len(raw_args) else None
            bound[argument.name] = argument.convert(raw)
        return bound


REGISTRY: dict[str, InspectorSpec] = {}


def inspector(name: str, description: str, *arguments: Argument):
    """Register the decorated function under a command name."""
    def decorator(func: Callable) -> Callable:
        if name in REGISTRY:
            raise ValueError(f"Inspector already registered: {name}")
        REGISTRY[name] = InspectorSpec(name, description, func, tuple(arguments))
        return func
    return decorator


def lookup(name: str) -> InspectorSpec | None:
    return REGISTRY.get(name)


def catalogue() -> list[dict[str, str]]:
    """Command/Description rows for every registered inspector, by name."""
    return [
        {"Command": spec.name, "Description": spec.description}
        for spec in sorted(REGISTRY.values(), key=lambda s: s.name)
    ]


def load_inspectors() -> dict[str, InspectorSpec]:
    """Import the inspector modules so their decorators run."""
    from site_inspector import content_checks, platform_checks, security_checks, woo_checks  # noqa: F401
    return REGISTRY
