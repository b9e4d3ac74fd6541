"""Exception hierarchy for the provisioner bot.

External call failures are not wrapped: boto3 raises ``ClientError`` and
``BotoCoreError`` and those propagate to the command handler boundary as-is.
"""


class LambdaBotError(Exception):
    """Base class for all errors raised by the bot itself."""


class MissingPrerequisiteError(LambdaBotError):
    """A required local artifact or setting is absent.

    Attributes:
        hint: Remediation hint shown to the chat user.
    """

    def __init__(self, message: str, hint: str = ""):
        super().__init__(message)
        self.hint = hint


class DeploymentPackageMissingError(MissingPrerequisiteError):
    """The prepared deployment bundle is not on disk."""

    def __init__(self, path: str):
        super().__init__(
            f"Deployment package '{path}' not found",
            hint="Build the lookup function bundle or set DEPLOY_PACKAGE_PATH.",
        )
        self.path = path


class ExecutionRoleMissingError(MissingPrerequisiteError):
    """No execution role ARN is configured for new functions."""

    def __init__(self) -> None:
        super().__init__(
            "Lambda execution role is not configured",
            hint="Set AWS_ROLE_ARN to the ARN of the Lambda execution role.",
        )


class CommandUsageError(LambdaBotError):
    """Malformed chat command arguments."""
