"""Constants and environment configuration for the HL7 mapper"""

import os

REGION_NAME = os.getenv("AWS_REGION_NAME", "eu-west-2")
SPLUNK_FIREHOSE_NAME = os.getenv("SPLUNK_FIREHOSE_NAME", "hl7-mapper-internal-dev-splunk-firehose")

DEFAULT_HL7_VERSION = os.getenv("DEFAULT_HL7_VERSION", "2.3")
MANDATORY_SEGMENTS = tuple(
    segment.strip().upper() for segment in os.getenv("HL7_MANDATORY_SEGMENTS", "PID,PV1").split(",") if segment.strip()
)

SENDING_APPLICATION = os.getenv("HL7_SENDING_APPLICATION", "NODEAPP")
SENDING_FACILITY = os.getenv("HL7_SENDING_FACILITY", "HOSP")
RECEIVING_APPLICATION = os.getenv("HL7_RECEIVING_APPLICATION", "HL7SYS")
RECEIVING_FACILITY = os.getenv("HL7_RECEIVING_FACILITY", "HOSP")

HEADER_SEGMENT = "MSH"
FIELD_SEPARATOR = "|"
ENCODING_CHARACTERS = "^~\\&"
SEGMENT_SEPARATOR = "\n"
HL7_CONTENT_TYPE = "x-application/hl7-v2+er7"
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

ROOT_PATH = "$"
DEFAULT_MAX_MATCHES = 25
OBJECT_KEYS_LIMIT = 200


class HeaderField:
    """MSH field numbers with special handling"""

    FIELD_SEPARATOR = 1
    ENCODING_CHARACTERS = 2
    DATE_TIME_OF_MESSAGE = 7
    MESSAGE_TYPE = 9
    MESSAGE_CONTROL_ID = 10
    PROCESSING_ID = 11
    VERSION_ID = 12

