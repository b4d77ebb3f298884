"""Custom exceptions for gapicgen.

This module defines a hierarchy of exceptions used throughout gapicgen to
report why a client could not be generated from a set of descriptors.
"""


class GapicGenError(Exception):
    """Base exception for all gapicgen errors.

    All exceptions raised by gapicgen inherit from this class, making it easy
    to catch every generation failure with a single except clause. The plugin
    front end reports the message of the first one it sees back to protoc.

    Example:
        try:
            generator.generate_service(file, service)
        except GapicGenError as e:
            response.error = e.message
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class DescriptorError(GapicGenError):
    """Base exception for descriptor lookup errors."""

    pass


class TypeNotFoundError(DescriptorError):
    """A method referenced a type that is not in the descriptor set.

    Attributes:
        type_name: The fully-qualified name that could not be found.
    """

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(
            f'cannot find message type {type_name!r}, malformed descriptor?'
        )


class ImportResolutionError(DescriptorError):
    """The import path of a descriptor could not be derived.

    Attributes:
        element: Name of the element whose import was requested.
        reason: Why the import could not be derived.
    """

    def __init__(self, element: str, reason: str | None = None):
        self.element = element
        self.reason = reason
        message = f"can't determine import path for {element}"
        if reason:
            message += f'; {reason}'
        super().__init__(message)


class MissingAnnotationError(DescriptorError):
    """A required annotation is absent from a descriptor.

    Attributes:
        element: Name of the annotated element.
        annotation: Name of the missing annotation.
    """

    def __init__(self, element: str, annotation: str):
        self.element = element
        self.annotation = annotation
        super().__init__(f'{element} is missing required annotation {annotation}')


class CodeGenerationError(GapicGenError):
    """Error during code generation.

    Attributes:
        context: Additional context about what was being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, context: str | None = None, cause: Exception | None = None
    ):
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f'{message} (while generating {context})'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class MethodGenerationError(CodeGenerationError):
    """Error generating the client method for one RPC.

    Attributes:
        service: Name of the service declaring the method.
        method: Name of the method.
    """

    def __init__(self, service: str, method: str, cause: Exception | None = None):
        self.service = service
        self.method = method
        super().__init__(
            f"failed to generate method '{method}'",
            context=f'{service}.{method}',
            cause=cause,
        )


class PagingShapeError(CodeGenerationError):
    """A method looks paginated but its element field is ambiguous.

    Raised when a request/response pair carries the paging token fields but
    the response has zero or several repeated fields.

    Attributes:
        method: Name of the offending method.
        message_name: Name of the response message.
        reason: Short description of the problem.
    """

    def __init__(self, method: str, message_name: str, reason: str):
        self.method = method
        self.message_name = message_name
        self.reason = reason
        super().__init__(
            f'{method} looks like paging method, but {reason} in {message_name}'
        )


class ConfigurationError(GapicGenError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OutputError(GapicGenError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class UnsupportedFeatureError(GapicGenError):
    """Attempted to use an unsupported feature.

    Attributes:
        feature: Description of the unsupported feature.
        suggestion: Optional suggestion for a workaround.
    """

    def __init__(self, feature: str, suggestion: str | None = None):
        self.feature = feature
        self.suggestion = suggestion
        message = f'Unsupported feature: {feature}'
        if suggestion:
            message += f'. {suggestion}'
        super().__init__(message)
