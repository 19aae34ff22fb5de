import logging
from typing import Any, Dict

import boto3

from campusapi.config import Settings

logger = logging.getLogger(__name__)


class AwsService:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.aws_access_key_id = settings.AWS_ACCESS_KEY_ID
        self.aws_secret_access_key = settings.AWS_SECRET_ACCESS_KEY
        self.region_name = settings.AWS_REGION

    def _client(self, service: str):
        if self.aws_access_key_id and self.aws_secret_access_key:
            return boto3.client(
                service,
                region_name=self.region_name,
                aws_access_key_id=self.aws_access_key_id,
                aws_secret_access_key=self.aws_secret_access_key,
            )

        return boto3.client(service, region_name=self.region_name)

    def send_ses_email(self, source: str, to_email: str, subject: str, body_html: str) -> str:
        """Send an HTML email via AWS SES and return the SES MessageId.

        botocore errors (ClientError, BotoCoreError) propagate to the caller.
        """
        ses = self._client("ses")
        response: Dict[str, Any] = ses.send_email(
            Source=source,
            Destination={"ToAddresses": [to_email]},
            Message={
                "Subject": {"Data": subject, "Charset": "UTF-8"},
                "Body": {"Html": {"Data": body_html, "Charset": "UTF-8"}},
            },
        )
        return response["MessageId"]
