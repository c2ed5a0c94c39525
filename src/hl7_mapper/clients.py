"""Initialise the logger and the AWS clients used by the HL7 mapper"""

import logging

from boto3 import client as boto3_client
from botocore.config import Config

from hl7_mapper.constants import REGION_NAME

logging.basicConfig()
logger = logging.getLogger()
logger.setLevel("INFO")

firehose_client = boto3_client("firehose", config=Config(region_name=REGION_NAME))
