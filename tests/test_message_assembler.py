import unittest
from datetime import datetime
from unittest.mock import patch

from hl7_mapper.mapping_table import MappingTable
from hl7_mapper.message_assembler import build_message, generate_header_overrides, included_segments
from hl7_mapper.models.errors import MissingRequiredFieldError, ReservedCharacterError
from hl7_mapper.models.segment_schema import SegmentSchema
from hl7_mapper.schema_provider import get_schemas_for_version
from hl7_mapper.segment_encoder import SegmentEncoder
from tests.utils_for_tests.values_for_tests import (
    ADMISSION_MAPPINGS,
    HEADER_OVERRIDES,
    admission_document,
    small_schemas,
)

MANDATORY = ("PID", "PV1")


class TestBuildMessage(unittest.TestCase):
    def setUp(self):
        self.logger_info_patcher = patch("hl7_mapper.message_assembler.logger.info")
        self.mock_logger_info = self.logger_info_patcher.start()
        self.logger_warning_patcher = patch("hl7_mapper.message_assembler.logger.warning")
        self.mock_logger_warning = self.logger_warning_patcher.start()
        self.schemas = small_schemas()
        self.table = MappingTable.from_records(ADMISSION_MAPPINGS)
        self.document = admission_document()

    def tearDown(self):
        patch.stopall()

    def build(self, version="2.3", overrides=HEADER_OVERRIDES, **kwargs):
        return build_message(
            self.schemas, self.table, self.document, version, overrides, mandatory_segments=MANDATORY, **kwargs
        )

    def test_builds_header_and_mandatory_segments(self):
        message = self.build()

        self.assertEqual(
            message,
            "MSH|^~\\&|||||20240101000000||ADT^A01|MSG1|P|2.3\n"
            "PID|||P1001||Kumar|||M\n"
            "PV1||O|",
        )
        self.mock_logger_info.assert_called_once_with("Building HL7 message with segments ['MSH', 'PID', 'PV1']")

    def test_mapped_segments_follow_mandatory_segments_in_id_order(self):
        self.table.upsert("NTE", 3, "$.allergies[0].description")
        self.table.upsert("AL1", 3, "$.allergies[0].code")

        lines = self.build().split("\n")

        self.assertEqual([line[:3] for line in lines], ["MSH", "PID", "PV1", "AL1", "NTE"])
        self.assertEqual(lines[3], "AL1|1||PEN")
        self.assertEqual(lines[4], "NTE|||Penicillin")

    def test_segments_without_schema_are_left_out(self):
        self.table.upsert("ZPI", 1, "$.patient.id")

        message = build_message(
            self.schemas, self.table, self.document, "2.3", HEADER_OVERRIDES, mandatory_segments=("PID", "PV1", "EVN")
        )

        self.assertEqual([line[:3] for line in message.split("\n")], ["MSH", "PID", "PV1"])

    def test_header_is_emitted_without_header_schema(self):
        del self.schemas["MSH"]

        header, pid, pv1 = self.build().split("\n")

        self.assertEqual(
            header, "MSH|^~\\&|NODEAPP|HOSP|HL7SYS|HOSP|20240101000000||ADT^A01|MSG1|P|2.3|||||||||"
        )
        self.assertEqual((pid, pv1), ("PID|||P1001||Kumar|||M", "PV1||O|"))
        self.assertNotIn("MSH", self.schemas)

    def test_header_is_emitted_for_a_single_segment_schema(self):
        table = MappingTable.from_records([{"segment": "PID", "field": 3, "sourcePath": "$.patient.id"}])
        schemas = {"PID": SegmentSchema(max_field=5, required_fields=frozenset({3}))}

        message = build_message(schemas, table, {"patient": {"id": "P1"}}, "2.3", {7: "T", 10: "M"}, ())

        header, pid = message.split("\n")
        self.assertTrue(header.startswith("MSH|^~\\&|NODEAPP|HOSP|HL7SYS|HOSP|T||ADT^A01|M|P|2.3|"))
        self.assertEqual(header.count("|"), 20)
        self.assertEqual(pid, "PID|||P1||")

    def test_version_is_written_to_header(self):
        self.assertTrue(self.build(version="2.5").split("\n")[0].endswith("|P|2.5"))
        self.assertTrue(self.build(version=None).split("\n")[0].endswith("|P|"))
        self.assertTrue(self.build(version="").split("\n")[0].endswith("|P|"))

    def test_computed_overrides_win_over_version(self):
        header = self.build(version="2.3", overrides={**HEADER_OVERRIDES, 12: "2.5"}).split("\n")[0]

        self.assertTrue(header.endswith("|MSG1|P|2.5"))

    def test_build_message_is_deterministic(self):
        self.table.upsert("NTE", 3, "$.visit.location")

        self.assertEqual(self.build(), self.build())

    def test_removing_sole_source_of_required_field_fails_on_that_field(self):
        self.table.remove("PID", 5)

        with self.assertRaises(MissingRequiredFieldError) as context:
            self.build()

        self.assertEqual((context.exception.segment, context.exception.field), ("PID", 5))
        self.assertEqual(str(context.exception), "PID-5 is required; provide a value (mapping or default)")
        self.mock_logger_warning.assert_called_once_with("Required field PID-5 has no value")

    def test_first_failure_in_output_order_is_reported(self):
        self.table.remove("PV1", 2)
        self.table.remove("PID", 5)
        self.table.remove("PID", 3)

        with self.assertRaises(MissingRequiredFieldError) as context:
            self.build()

        self.assertEqual((context.exception.segment, context.exception.field), ("PID", 3))

    def test_mandatory_segment_without_mappings_is_validated(self):
        self.table.remove("PV1", 2)

        with self.assertRaises(MissingRequiredFieldError) as context:
            self.build()

        self.assertEqual((context.exception.segment, context.exception.field), ("PV1", 2))

    def test_required_field_mapped_to_missing_value_fails(self):
        self.table.upsert("PID", 3, "$.patient.nhsNumber")

        with self.assertRaises(MissingRequiredFieldError) as context:
            self.build()

        self.assertEqual((context.exception.segment, context.exception.field), ("PID", 3))

    def test_mapping_overrides_header_default(self):
        self.table.upsert("MSH", 9, "$.messageType")

        with self.assertRaises(MissingRequiredFieldError) as context:
            self.build()
        self.assertEqual((context.exception.segment, context.exception.field), ("MSH", 9))

        self.document["messageType"] = "ADT^A04"
        self.assertIn("||ADT^A04|MSG1|", self.build())

    def test_strict_encoder_rejects_delimiters_in_document_values(self):
        self.document["patient"]["name"]["last"] = "Kumar|Singh"

        self.assertIn("Kumar|Singh", self.build())
        with self.assertRaises(ReservedCharacterError) as context:
            self.build(encoder=SegmentEncoder(reject_reserved_characters=True))
        self.assertEqual((context.exception.segment, context.exception.field), ("PID", 5))

    def test_builds_message_from_bundled_schemas(self):
        schemas = get_schemas_for_version("2.3")

        message = build_message(schemas, self.table, self.document, "2.3", HEADER_OVERRIDES, MANDATORY)
        header, pid, pv1 = message.split("\n")

        self.assertEqual(header, "MSH|^~\\&|NODEAPP|HOSP|HL7SYS|HOSP|20240101000000||ADT^A01|MSG1|P|2.3|||||||")
        self.assertTrue(pid.startswith("PID|||P1001||Kumar|||M|"))
        self.assertEqual(pid.count("|"), 30)
        self.assertTrue(pv1.startswith("PV1||O|"))
        self.assertEqual(pv1.count("|"), 52)

    def test_bundled_2_5_header_requires_timestamp(self):
        schemas = get_schemas_for_version("2.5")

        with self.assertRaises(MissingRequiredFieldError) as context:
            build_message(schemas, self.table, self.document, "2.5", {10: "MSG1"}, MANDATORY)

        self.assertEqual((context.exception.segment, context.exception.field), ("MSH", 7))


class TestIncludedSegments(unittest.TestCase):
    def test_header_then_mandatory_then_mapped(self):
        schemas = small_schemas()
        table = MappingTable.from_records(
            [{"segment": "NTE", "field": 1, "sourcePath": "$.a"}, {"segment": "PID", "field": 3, "sourcePath": "$.b"}]
        )

        self.assertEqual(included_segments(schemas, table, ("PV1", "AL1")), ["MSH", "AL1", "PV1", "NTE", "PID"])
        self.assertEqual(included_segments(schemas, table, ("MSH",)), ["MSH", "NTE", "PID"])
        self.assertEqual(included_segments({}, table, ("PID",)), ["MSH"])


class TestGenerateHeaderOverrides(unittest.TestCase):
    def test_uses_given_clock_and_id(self):
        overrides = generate_header_overrides(now=datetime(2024, 1, 1, 9, 5, 7), message_id="MSG1")

        self.assertEqual(overrides, {7: "20240101090507", 10: "MSG1"})

    def test_generates_unique_message_ids(self):
        first = generate_header_overrides()
        second = generate_header_overrides()

        self.assertEqual(len(first[7]), 14)
        self.assertRegex(first[10], r"^[0-9a-f]{32}$")
        self.assertNotEqual(first[10], second[10])
