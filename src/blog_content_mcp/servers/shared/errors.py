ExtraInfoType = dict[str, str | None]


class ServerError(Exception):
    """A request error from the Blog Content server."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        msg = message
        if extra_info:
            msg += " (" + ", ".join([f"{key}: {value}" for key, value in extra_info.items() if value is not None]) + ")"
        super().__init__(msg)


class MissingInputError(ServerError):
    """A workflow step did not receive the result of the previous step."""

    def __init__(self, step: str, message: str):
        super().__init__(message=message, extra_info={"step": step})


class GenerationNotConfiguredError(ServerError):
    """No text generation provider is configured."""

    def __init__(self):
        super().__init__(message="No text generation provider is configured. Set OPEN_ROUTER_API_KEY or OPENAI_API_KEY to generate quizzes.")
