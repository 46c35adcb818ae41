"""Errors that abort a generation run.

Every failure is a data problem in the descriptor set, so nothing here is
retried: the run either produces a complete document or raises one of these.
"""


class GenerationError(Exception):
    """Base class for all fatal generation errors."""

    def __init__(self, message: str, *, subject: str = "") -> None:
        self.message = message
        self.subject = subject
        super().__init__(message)


class DescriptorLoadError(GenerationError):
    """The descriptor file could not be read or validated."""


class SettingsError(GenerationError):
    """The OpenAPI settings file could not be read or validated."""


class ServiceNotFoundError(GenerationError):
    """The file being generated declares no service."""

    def __init__(self, file_name: str) -> None:
        super().__init__(f"file '{file_name}' does not declare any service", subject=file_name)


class MissingHttpBindingError(GenerationError):
    """A method has no HTTP binding rule."""

    def __init__(self, method_name: str) -> None:
        super().__init__(
            f"cannot handle method '{method_name}' without HTTP API definitions",
            subject=method_name,
        )


class UnsupportedHttpBindingError(GenerationError):
    """A method's HTTP binding uses a pattern other than GET/POST/PUT/DELETE/PATCH."""

    def __init__(self, method_name: str) -> None:
        super().__init__(
            f"method '{method_name}' uses an unsupported HTTP binding pattern",
            subject=method_name,
        )


class MessageNotFoundError(GenerationError):
    def __init__(self, message_name: str) -> None:
        super().__init__(f"could not find message with name '{message_name}'", subject=message_name)


class BodyFieldNotFoundError(GenerationError):
    """A PUT body selector names a field the input message does not have."""

    def __init__(self, field_name: str, message_name: str) -> None:
        super().__init__(
            f"could not find member '{field_name}' of '{message_name}' for the request body",
            subject=field_name,
        )


class HeaderMemberNotFoundError(GenerationError):
    """Header aliases reference fields missing from the input message."""

    def __init__(self, member_names: list[str], message_name: str) -> None:
        self.member_names = member_names
        super().__init__(
            f"could not find header members '{', '.join(member_names)}' in message '{message_name}'",
            subject=message_name,
        )


class DuplicateOperationError(GenerationError):
    """Two methods bind to the same endpoint and HTTP verb."""

    def __init__(self, method_name: str, verb: str, endpoint: str, previous: str) -> None:
        super().__init__(
            f"method '{method_name}' binds {verb.upper()} {endpoint} already bound by '{previous}'",
            subject=method_name,
        )


class SchemaNameConflictError(GenerationError):
    """A message has the name of a shared error schema the document also needs."""

    def __init__(self, schema_name: str) -> None:
        super().__init__(
            f"message '{schema_name}' conflicts with the shared error schema of the same name",
            subject=schema_name,
        )
