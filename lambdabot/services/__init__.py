"""Business logic services package.

Contains the AWS-facing services: Lambda provisioning and the DynamoDB
config store shared by the bot and the lookup handler.
"""
