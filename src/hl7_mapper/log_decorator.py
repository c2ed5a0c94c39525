"""This module contains the logging decorator for sending the appropriate logs to Cloudwatch and Firehose.
The decorator log pattern is shared by the convert handler and any caller wrapping the engine."""

import json
import time
from datetime import datetime
from functools import wraps

from hl7_mapper.clients import firehose_client, logger


def send_log_to_firehose(stream_name: str, log_data: dict) -> None:
    """Sends the log_message to Firehose"""
    try:
        record = {"Data": json.dumps({"event": log_data}).encode("utf-8")}
        firehose_client.put_record(DeliveryStreamName=stream_name, Record=record)
    except Exception as error:  # pylint:disable = broad-exception-caught
        logger.exception("Error sending log to Firehose: %s", error)


def generate_and_send_logs(
    stream_name: str,
    start_time: float,
    base_log_data: dict,
    additional_log_data: dict,
    use_ms_precision: bool = False,
    is_error_log: bool = False,
) -> None:
    """Generates log data which includes the base_log_data, additional_log_data, and time taken (calculated using the
    current time and given start_time) and sends them to Cloudwatch and Firehose."""
    seconds_elapsed = time.time() - start_time
    formatted_time_elapsed = f"{round(seconds_elapsed * 1000, 5)}ms" if use_ms_precision else f"{round(seconds_elapsed, 5)}s"

    log_data = {**base_log_data, "time_taken": formatted_time_elapsed, **additional_log_data}
    log_function = logger.error if is_error_log else logger.info
    log_function(json.dumps(log_data))
    send_log_to_firehose(stream_name, log_data)


def logging_decorator(prefix: str, stream_name: str):
    """Sends the appropriate logs to Cloudwatch and Firehose based on the function result.
    NOTE: The function must return a dictionary as its only return value. The dictionary is expected to contain
    all of the required additional details for logging.
    NOTE: Logs will include the result of the function call, less any response body, or, in the case of an
    Exception being raised, a status code of 500 and the error message."""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            base_log_data = {
                "function_name": f"{prefix}_{func.__name__}",
                "date_time": str(datetime.now()),
            }
            start_time = time.time()

            try:
                result = func(*args, **kwargs)
                generate_and_send_logs(stream_name, start_time, base_log_data, additional_log_data=_without_body(result))
                return result

            except Exception as e:
                additional_log_data = {"statusCode": 500, "error": str(e)}
                generate_and_send_logs(stream_name, start_time, base_log_data, additional_log_data, is_error_log=True)
                raise

        return wrapper

    return decorator


def _without_body(result: dict) -> dict:
    """Response bodies carry patient data and must not reach the logs"""
    return {key: value for key, value in result.items() if key != "body"}
