"""Lambda provisioning service.

Creates a uniquely named Lambda function from the prepared deployment bundle,
enables a public Function URL for it and grants anonymous invoke permission.
Each step is a separate AWS call. A failed step aborts the run and the steps
already completed are not rolled back, so a failure after CreateFunction
leaves the function behind; its name is logged for manual cleanup.
"""

import asyncio
import json
import logging
import re
import secrets
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Final

from ..exceptions import (
    CommandUsageError,
    DeploymentPackageMissingError,
    ExecutionRoleMissingError,
)
from ..models import ProvisionedFunction

logger = logging.getLogger(__name__)

FUNCTION_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
PUBLIC_ACCESS_STATEMENT_ID = "FunctionURLAllowPublicAccess"
LOOKUP_POLICY_NAME = "ConfigLookupAccess"

_BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(number: int) -> str:
    digits = []
    while True:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_ALPHABET[remainder])
        if number == 0:
            break
    return "".join(reversed(digits))


def generate_function_name(prefix: str = "lambda") -> str:
    """Build a function name from the current time and a random suffix.

    Args:
        prefix: Leading part of the name.

    Returns:
        Name like ``lambda-m2x8k1c0-3fa91b``.
    """
    timestamp = _to_base36(int(time.time() * 1000))
    return f"{prefix}-{timestamp}-{secrets.token_hex(3)}"


def validate_function_name(name: str) -> str:
    """Check a caller-supplied function name against Lambda naming rules.

    Raises:
        CommandUsageError: If the name is not 1-64 letters, digits, '-' or '_'.
    """
    if not FUNCTION_NAME_PATTERN.match(name):
        raise CommandUsageError(
            f"Invalid function name '{name}': use 1-64 letters, digits, '-' or '_'"
        )
    return name


class Provisioner:
    """Creates publicly reachable Lambda functions."""

    def __init__(
        self,
        lambda_client: Any,
        iam_client: Any,
        *,
        role_arn: str | None,
        package_path: str,
        runtime: str,
        handler: str,
        timeout: int,
        memory_size: int,
        name_prefix: str,
        table_name: str,
        attach_lookup_policy: bool = False,
    ):
        """Initialize provisioner.

        Args:
            lambda_client: boto3 Lambda client.
            iam_client: boto3 IAM client, used only for the lookup policy.
            role_arn: Execution role of new functions.
            package_path: Zip bundle uploaded as the function code.
            runtime: Lambda runtime identifier.
            handler: Entry point inside the bundle.
            timeout: Function timeout in seconds.
            memory_size: Function memory in MB.
            name_prefix: Prefix of generated function names.
            table_name: Config table, passed to the function's environment.
            attach_lookup_policy: Attach the inline lookup policy to the role.
        """
        self.lambda_client = lambda_client
        self.iam_client = iam_client
        self.role_arn = role_arn
        self.package_path = Path(package_path)
        self.runtime = runtime
        self.handler = handler
        self.timeout = timeout
        self.memory_size = memory_size
        self.name_prefix = name_prefix
        self.table_name = table_name
        self.attach_lookup_policy = attach_lookup_policy

    def check_prerequisites(self) -> None:
        """Make sure a provisioning run can start without any AWS call.

        Raises:
            DeploymentPackageMissingError: If the bundle is not on disk.
            ExecutionRoleMissingError: If no role ARN is configured.
        """
        if not self.package_path.is_file():
            raise DeploymentPackageMissingError(str(self.package_path))
        if not self.role_arn:
            raise ExecutionRoleMissingError()

    async def provision(
        self,
        function_name: str | None = None,
        on_created: Callable[[str], Awaitable[None]] | None = None,
    ) -> ProvisionedFunction:
        """Create a function, expose it publicly and return its URL.

        Args:
            function_name: Name to use, generated when omitted.
            on_created: Awaited with the function name once CreateFunction succeeded.

        Returns:
            ProvisionedFunction with the public Function URL.

        Raises:
            MissingPrerequisiteError: Before any AWS call, if the bundle or role is missing.
            CommandUsageError: If the supplied name is invalid.
            botocore.exceptions.ClientError: If any AWS call fails.
        """
        self.check_prerequisites()

        if function_name:
            function_name = validate_function_name(function_name)
        else:
            function_name = generate_function_name(self.name_prefix)

        zip_file = self.package_path.read_bytes()

        logger.info(f"Creating Lambda function: {function_name}")
        created = await asyncio.to_thread(
            self.lambda_client.create_function,
            FunctionName=function_name,
            Runtime=self.runtime,
            Role=self.role_arn,
            Handler=self.handler,
            Code={"ZipFile": zip_file},
            Timeout=self.timeout,
            MemorySize=self.memory_size,
            Environment={"Variables": {"CONFIG_TABLE_NAME": self.table_name}},
        )
        logger.info(f"Created Lambda function: {function_name}")

        try:
            if on_created is not None:
                await on_created(function_name)

            url_response = await asyncio.to_thread(
                self.lambda_client.create_function_url_config,
                FunctionName=function_name,
                AuthType="NONE",
            )
            function_url = url_response["FunctionUrl"]
            logger.info(f"Created Function URL for {function_name}: {function_url}")

            await asyncio.to_thread(
                self.lambda_client.add_permission,
                FunctionName=function_name,
                StatementId=PUBLIC_ACCESS_STATEMENT_ID,
                Action="lambda:InvokeFunctionUrl",
                Principal="*",
                FunctionUrlAuthType="NONE",
            )
            logger.info(f"Added public access permission to {function_name}")

            if self.attach_lookup_policy:
                await asyncio.to_thread(self._put_lookup_policy)

        except Exception:
            logger.error(
                f"Provisioning of {function_name} failed after CreateFunction; "
                f"function {function_name} was left in place"
            )
            raise

        return ProvisionedFunction(
            function_name=function_name,
            function_arn=created.get("FunctionArn"),
            function_url=function_url,
        )

    def _put_lookup_policy(self) -> None:
        """Attach the inline policy the lookup handler needs to the execution role."""
        role_name = str(self.role_arn).rsplit("/", 1)[-1]
        self.iam_client.put_role_policy(
            RoleName=role_name,
            PolicyName=LOOKUP_POLICY_NAME,
            PolicyDocument=json.dumps({
                "Version": "2012-10-17",
                "Statement": [
                    {
                        "Effect": "Allow",
                        "Action": ["lambda:GetFunctionUrlConfig"],
                        "Resource": "*"
                    },
                    {
                        "Effect": "Allow",
                        "Action": ["dynamodb:GetItem", "dynamodb:PutItem"],
                        "Resource": f"arn:aws:dynamodb:*:*:table/{self.table_name}"
                    }
                ]
            })
        )
        logger.info(f"Attached {LOOKUP_POLICY_NAME} policy to role {role_name}")
