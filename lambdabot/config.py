"""Configuration management for the provisioner bot.

Handles all application configuration including environment variables, the
YAML provisioning file, and default settings. Provides structured configuration
classes for different aspects of the application (bot, AWS, provisioning, store).
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings


class BotConfig(BaseSettings):
    """Main Telegram bot configuration.

    Attributes:
        bot_token: Telegram bot API token from environment.
        authorized_chat_id: Only chat allowed to issue commands, None disables the gate.
        require_authorized_chat: Refuse to start when no authorized chat is set.
        update_queue_size: Capacity of the bounded update queue fed by polling.
        log_level: Root logging level.
    """
    bot_token: str | None = Field(default=None, validation_alias="TELEGRAM_BOT_TOKEN")
    authorized_chat_id: int | None = Field(default=None, validation_alias="AUTHORIZED_CHAT_ID")
    require_authorized_chat: bool = Field(default=False, validation_alias="REQUIRE_AUTHORIZED_CHAT")
    update_queue_size: int = Field(default=100, validation_alias="UPDATE_QUEUE_SIZE")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


class AwsConfig(BaseSettings):
    """AWS account settings.

    Credentials are resolved by boto3 itself (environment, profile or role).

    Attributes:
        region: Region for all clients, None lets boto3 decide.
        role_arn: Execution role attached to provisioned functions.
    """
    region: str | None = Field(default=None, validation_alias="AWS_REGION")
    role_arn: str | None = Field(default=None, validation_alias="AWS_ROLE_ARN")


class ProvisioningConfig(BaseSettings):
    """Fixed parameters of every provisioned function.

    Attributes:
        package_path: Zip bundle uploaded as the function code.
        runtime: Lambda runtime identifier.
        handler: Entry point inside the bundle.
        timeout: Function timeout in seconds.
        memory_size: Function memory in MB.
        name_prefix: Prefix of generated function names.
        attach_lookup_policy: Attach an inline policy to the execution role so
            the deployed function can read its own URL and the config table.
    """
    package_path: str = Field(default="lookup_function.zip", validation_alias="DEPLOY_PACKAGE_PATH")
    runtime: str = Field(default="python3.12", validation_alias="LAMBDA_RUNTIME")
    handler: str = Field(default="lambdabot.lookup.handler", validation_alias="LAMBDA_HANDLER")
    timeout: int = Field(default=10, validation_alias="LAMBDA_TIMEOUT")
    memory_size: int = Field(default=128, validation_alias="LAMBDA_MEMORY_SIZE")
    name_prefix: str = Field(default="lambda", validation_alias="FUNCTION_NAME_PREFIX")
    attach_lookup_policy: bool = Field(default=False, validation_alias="ATTACH_LOOKUP_POLICY")


class StoreConfig(BaseSettings):
    """Config table settings.

    Attributes:
        table_name: DynamoDB table holding config records.
        enabled: Whether provisioning records the new function in the table.
    """
    table_name: str = Field(default="Config", validation_alias="CONFIG_TABLE_NAME")
    enabled: bool = Field(default=True, validation_alias="STORE_ENABLED")


class LookupSettings(BaseSettings):
    """Settings read by the lookup handler inside the deployed function.

    Attributes:
        function_name: Own function name, set by the Lambda runtime.
        region: Region the function runs in, set by the Lambda runtime.
        table_name: DynamoDB table holding config records.
        auto_create_default: Persist a default record when none exists.
    """
    function_name: str | None = Field(default=None, validation_alias="AWS_LAMBDA_FUNCTION_NAME")
    region: str | None = Field(default=None, validation_alias="AWS_REGION")
    table_name: str = Field(default="Config", validation_alias="CONFIG_TABLE_NAME")
    auto_create_default: bool = Field(default=False, validation_alias="AUTO_CREATE_DEFAULT")


class Config:
    """Application configuration manager.

    Centralizes loading of environment variables, the YAML provisioning file
    and default values. Environment variables win over the YAML file, which
    wins over the defaults.
    """

    def __init__(self, config_dir: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory, defaults to lambdabot/config.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent / "config"

        self.config_dir = Path(config_dir)

        self.bot = BotConfig()
        self.aws = AwsConfig()
        self.store = StoreConfig()
        self.provisioning = self._load_provisioning()

    def _load_provisioning(self) -> ProvisioningConfig:
        """Load provisioning parameters, applying provisioning.yml under the environment.

        Returns:
            ProvisioningConfig with file values for every field not set in the environment.
        """
        provisioning = ProvisioningConfig()

        provisioning_path = self.config_dir / "provisioning.yml"
        if not provisioning_path.exists():
            return provisioning

        with open(provisioning_path) as f:
            data = yaml.safe_load(f) or {}

        overrides = {
            name: value
            for name, value in data.items()
            if name in ProvisioningConfig.model_fields and name not in provisioning.model_fields_set
        }
        return provisioning.model_copy(update=overrides)

    def to_dict(self) -> dict[str, Any]:
        """Get all sections as plain dictionaries for the DI container.

        Returns:
            Mapping of section name to its settings.
        """
        return {
            "bot": self.bot.model_dump(),
            "aws": self.aws.model_dump(),
            "store": self.store.model_dump(),
            "provisioning": self.provisioning.model_dump(),
        }


# Global configuration instance
config = Config()
