# blogcms/services/exceptions.py

class ServiceError(Exception):
    """Clase base para errores de la capa de servicio."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class DomainValidationError(ServiceError):
    """Entrada de dominio inválida; ``field`` nombra el atributo culpable."""

    def __init__(self, detail: str, field: str | None = None):
        self.field = field
        super().__init__(detail)


class ResourceNotFoundError(ServiceError):
    """Recurso no encontrado."""

    @classmethod
    def for_entity(cls, entity: str, key: str) -> "ResourceNotFoundError":
        return cls(f"{entity.capitalize()} with id {key} not found")


class ConflictError(ServiceError):
    """Conflicto de estado en la operación."""
    pass


class AuthenticationError(ServiceError):
    """Credenciales ausentes, inválidas o revocadas."""
    pass


class StorageUnavailableError(ServiceError):
    """La base de datos o el proveedor de media no están disponibles."""
    pass
