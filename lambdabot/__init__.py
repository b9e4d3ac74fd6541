"""Lambda Provisioner Bot Application Package.

A Telegram bot that provisions AWS Lambda functions with public Function URLs
and keeps a per-function integer configuration value in DynamoDB. The deployed
functions read that value back through the lookup handler in ``lambdabot.lookup``.

The application follows a modular architecture with separate concerns for:
- Bot handlers and chat command dispatching
- Lambda provisioning through the AWS Lambda and IAM APIs
- Config record storage in DynamoDB
- Config lookup from inside the deployed function
"""
