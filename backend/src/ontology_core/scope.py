"""Tenant scope: the (tenant, package, channel) partition of all ontology data."""

from dataclasses import dataclass
from typing import Optional

from .errors import InvalidScopeError, ScopeMismatchError

PARTITION_SEPARATOR = "::"


@dataclass(frozen=True)
class TenantScope:
    """Immutable identity that partitions ontology artifacts and graph queries.

    Every persisted artifact and every lookup is qualified by a scope.
    Equality is strict across all three parts.

    Attributes:
        tenant_id: Owning tenant
        package: Ontology package within the tenant
        channel: Release channel within the package (e.g. "dev", "prod")
    """

    tenant_id: str
    package: str
    channel: str

    def __post_init__(self) -> None:
        for name in ("tenant_id", "package", "channel"):
            raw = getattr(self, name)
            if not isinstance(raw, str) or not raw.strip():
                raise InvalidScopeError(f"{name} is required")
            # frozen dataclass: trimming has to bypass __setattr__
            object.__setattr__(self, name, raw.strip())

    @property
    def partition_key(self) -> str:
        """Hierarchical partition key used by storage layers."""
        return PARTITION_SEPARATOR.join((self.tenant_id, self.package, self.channel))

    def __str__(self) -> str:
        return self.partition_key

    @classmethod
    def parse(cls, value: str) -> "TenantScope":
        """Parse a partition key of the form ``tenant::package::channel``.

        Raises:
            InvalidScopeError: If the value does not have exactly three parts
        """
        if not value or not value.strip():
            raise InvalidScopeError("partition key is empty", value=value)
        parts = value.split(PARTITION_SEPARATOR)
        if len(parts) != 3:
            raise InvalidScopeError(
                "partition key must have the form tenant::package::channel",
                value=value,
            )
        return cls(parts[0], parts[1], parts[2])

    @classmethod
    def try_parse(cls, value: str) -> Optional["TenantScope"]:
        """Parse a partition key, returning None instead of raising."""
        try:
            return cls.parse(value)
        except InvalidScopeError:
            return None

    def ensure_same(self, other: "TenantScope") -> None:
        """Fail loudly when ``other`` is not this exact scope.

        Raises:
            ScopeMismatchError: If any of tenant, package or channel differ
        """
        if self != other:
            raise ScopeMismatchError(expected=str(self), actual=str(other))

    def with_tenant(self, tenant_id: str) -> "TenantScope":
        return TenantScope(tenant_id, self.package, self.channel)

    def with_package(self, package: str) -> "TenantScope":
        return TenantScope(self.tenant_id, package, self.channel)

    def with_channel(self, channel: str) -> "TenantScope":
        return TenantScope(self.tenant_id, self.package, channel)

    def base_namespace(self, template: str) -> str:
        """Render the ontology namespace for this scope.

        Args:
            template: Template containing ``{tenant}``, ``{package}`` and
                ``{channel}`` tokens

        Returns:
            The namespace with tokens replaced
        """
        return (
            template.replace("{tenant}", self.tenant_id)
            .replace("{package}", self.package)
            .replace("{channel}", self.channel)
        )
