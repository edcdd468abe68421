ExtraInfoType = dict[str, str | None]


class ClientError(Exception):
    """An error raised by the GitHub Blog client."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        details = [f"{key}: {value}" for key, value in (extra_info or {}).items() if value is not None]
        super().__init__(f"{message} ({', '.join(details)})" if details else message)


class RequestError(ClientError):
    """An upstream failure (auth, rate limit, network, server error) from the GitHub API."""

    def __init__(self, action: str, message: str | None = None, extra_info: ExtraInfoType | None = None):
        super().__init__(message="A request to the GitHub API failed.", extra_info={"action": action, "message": message, **(extra_info or {})})


class ResourceNotFoundError(RequestError):
    """The requested path does not exist in the blog repository."""

    def __init__(self, action: str, resource: str | None = None, extra_info: ExtraInfoType | None = None):
        super().__init__(
            action=action,
            message="The path does not exist in the blog repository.",
            extra_info={"resource": resource, **(extra_info or {})},
        )


class ResourceTypeMismatchError(RequestError):
    """The GitHub API returned a directory listing where a file was expected, or the reverse."""

    def __init__(self, action: str, resource: str, expected_type: str, actual_type: str):
        super().__init__(action=action, message=f"{resource} is a {actual_type}, expected a {expected_type}")
