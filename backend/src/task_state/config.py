"""
Configuration module for Lambda handlers.
Loads all environment variables needed by the activity endpoints.
"""
import os


class Config:
    """Centralized configuration from environment variables."""

    # AWS Region
    AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')

    # DynamoDB Tables
    TASKS_TABLE = os.environ.get('TASKS_TABLE', '')
    APPLICATIONS_TABLE = os.environ.get('APPLICATIONS_TABLE', '')

    # DynamoDB GSIs
    CREATOR_INDEX = os.environ.get('CREATOR_INDEX', 'CreatorIndex')
    ASSIGNEE_INDEX = os.environ.get('ASSIGNEE_INDEX', 'AssigneeIndex')
    APPLICANT_INDEX = os.environ.get('APPLICANT_INDEX', 'ApplicantIndex')
    TASK_APPLICATIONS_INDEX = os.environ.get('TASK_APPLICATIONS_INDEX', 'TaskIndex')

    # Cognito claim carrying the numeric marketplace user id
    VIEWER_ID_CLAIM = os.environ.get('VIEWER_ID_CLAIM', 'custom:user_id')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()


config = Config()
