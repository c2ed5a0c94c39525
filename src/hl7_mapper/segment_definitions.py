# This file holds the HL7 v2 segment dictionary the schema provider is built from
# Each segment lists its fields in order as (description, optionality); R marks a required field

R = "R"
O = "O"

_MSH_23 = [
    ("Field Separator", R),
    ("Encoding Characters", R),
    ("Sending Application", O),
    ("Sending Facility", O),
    ("Receiving Application", O),
    ("Receiving Facility", O),
    ("Date/Time Of Message", O),
    ("Security", O),
    ("Message Type", R),
    ("Message Control ID", R),
    ("Processing ID", R),
    ("Version ID", R),
    ("Sequence Number", O),
    ("Continuation Pointer", O),
    ("Accept Acknowledgement Type", O),
    ("Application Acknowledgement Type", O),
    ("Country Code", O),
    ("Character Set", O),
    ("Principal Language of Message", O),
]

_EVN_23 = [
    ("Event Type Code", O),
    ("Recorded Date/Time", R),
    ("Date/Time Planned Event", O),
    ("Event Reason Code", O),
    ("Operator ID", O),
    ("Event Occurred", O),
]

_PID_23 = [
    ("Set ID - Patient ID", O),
    ("Patient ID (External ID)", O),
    ("Patient ID (Internal ID)", R),
    ("Alternate Patient ID", O),
    ("Patient Name", R),
    ("Mother's Maiden Name", O),
    ("Date of Birth", O),
    ("Sex", O),
    ("Patient Alias", O),
    ("Race", O),
    ("Patient Address", O),
    ("County Code", O),
    ("Phone Number - Home", O),
    ("Phone Number - Business", O),
    ("Primary Language", O),
    ("Marital Status", O),
    ("Religion", O),
    ("Patient Account Number", O),
    ("SSN Number - Patient", O),
    ("Driver's License Number", O),
    ("Mother's Identifier", O),
    ("Ethnic Group", O),
    ("Birth Place", O),
    ("Multiple Birth Indicator", O),
    ("Birth Order", O),
    ("Citizenship", O),
    ("Veterans Military Status", O),
    ("Nationality", O),
    ("Patient Death Date and Time", O),
    ("Patient Death Indicator", O),
]

_PV1_23 = [
    ("Set ID - Patient Visit", O),
    ("Patient Class", R),
    ("Assigned Patient Location", O),
    ("Admission Type", O),
    ("Preadmit Number", O),
    ("Prior Patient Location", O),
    ("Attending Doctor", O),
    ("Referring Doctor", O),
    ("Consulting Doctor", O),
    ("Hospital Service", O),
    ("Temporary Location", O),
    ("Preadmit Test Indicator", O),
    ("Readmission Indicator", O),
    ("Admit Source", O),
    ("Ambulatory Status", O),
    ("VIP Indicator", O),
    ("Admitting Doctor", O),
    ("Patient Type", O),
    ("Visit Number", O),
    ("Financial Class", O),
    ("Charge Price Indicator", O),
    ("Courtesy Code", O),
    ("Credit Rating", O),
    ("Contract Code", O),
    ("Contract Effective Date", O),
    ("Contract Amount", O),
    ("Contract Period", O),
    ("Interest Code", O),
    ("Transfer to Bad Debt Code", O),
    ("Transfer to Bad Debt Date", O),
    ("Bad Debt Agency Code", O),
    ("Bad Debt Transfer Amount", O),
    ("Bad Debt Recovery Amount", O),
    ("Delete Account Indicator", O),
    ("Delete Account Date", O),
    ("Discharge Disposition", O),
    ("Discharged to Location", O),
    ("Diet Type", O),
    ("Servicing Facility", O),
    ("Bed Status", O),
    ("Account Status", O),
    ("Pending Location", O),
    ("Prior Temporary Location", O),
    ("Admit Date/Time", O),
    ("Discharge Date/Time", O),
    ("Current Patient Balance", O),
    ("Total Charges", O),
    ("Total Adjustments", O),
    ("Total Payments", O),
    ("Alternate Visit ID", O),
    ("Visit Indicator", O),
    ("Other Healthcare Provider", O),
]

_NK1_23 = [
    ("Set ID - Next of Kin", R),
    ("Name", O),
    ("Relationship", O),
    ("Address", O),
    ("Phone Number", O),
    ("Business Phone Number", O),
    ("Contact Role", O),
    ("Start Date", O),
    ("End Date", O),
    ("Next of Kin/Associated Parties Job Title", O),
    ("Next of Kin/Associated Parties Job Code/Class", O),
    ("Next of Kin/Associated Parties Employee Number", O),
    ("Organization Name", O),
    ("Marital Status", O),
    ("Sex", O),
    ("Date of Birth", O),
    ("Living Dependency", O),
    ("Ambulatory Status", O),
    ("Citizenship", O),
    ("Primary Language", O),
    ("Living Arrangement", O),
    ("Publicity Indicator", O),
    ("Protection Indicator", O),
    ("Student Indicator", O),
    ("Religion", O),
    ("Mother's Maiden Name", O),
    ("Nationality", O),
    ("Ethnic Group", O),
    ("Contact Reason", O),
    ("Contact Person's Name", O),
    ("Contact Person's Telephone Number", O),
    ("Contact Person's Address", O),
    ("Associated Party's Identifiers", O),
    ("Job Status", O),
    ("Race", O),
    ("Handicap", O),
    ("Contact Person Social Security Number", O),
]

_AL1_23 = [
    ("Set ID - Allergy", R),
    ("Allergy Type", O),
    ("Allergy Code/Mnemonic/Description", R),
    ("Allergy Severity", O),
    ("Allergy Reaction", O),
    ("Identification Date", O),
]

_DG1_23 = [
    ("Set ID - Diagnosis", R),
    ("Diagnosis Coding Method", R),
    ("Diagnosis Code", O),
    ("Diagnosis Description", O),
    ("Diagnosis Date/Time", O),
    ("Diagnosis Type", R),
    ("Major Diagnostic Category", O),
    ("Diagnostic Related Group", O),
    ("DRG Approval Indicator", O),
    ("DRG Grouper Review Code", O),
    ("Outlier Type", O),
    ("Outlier Days", O),
    ("Outlier Cost", O),
    ("Grouper Version and Type", O),
    ("Diagnosis Priority", O),
    ("Diagnosing Clinician", O),
    ("Diagnosis Classification", O),
    ("Confidential Indicator", O),
    ("Attestation Date/Time", O),
]

_OBX_23 = [
    ("Set ID - Observation", O),
    ("Value Type", O),
    ("Observation Identifier", R),
    ("Observation Sub-ID", O),
    ("Observation Value", O),
    ("Units", O),
    ("References Range", O),
    ("Abnormal Flags", O),
    ("Probability", O),
    ("Nature of Abnormal Test", O),
    ("Observation Result Status", R),
    ("Date Last Observation Normal Values", O),
    ("User Defined Access Checks", O),
    ("Date/Time of the Observation", O),
    ("Producer's ID", O),
    ("Responsible Observer", O),
    ("Observation Method", O),
]

_NTE_23 = [
    ("Set ID - Notes and Comments", O),
    ("Source of Comment", O),
    ("Comment", O),
]


def _with_optionality(fields, required=(), optional=()):
    """Copies a field list, overriding the optionality of the given field numbers"""
    overridden = []
    for number, (description, optionality) in enumerate(fields, start=1):
        if number in required:
            optionality = R
        elif number in optional:
            optionality = O
        overridden.append((description, optionality))
    return overridden


HL7_DEFINITIONS = {
    "2.3": {
        "MSH": {"desc": "Message Header", "fields": _MSH_23},
        "EVN": {"desc": "Event Type", "fields": _EVN_23},
        "PID": {"desc": "Patient Identification", "fields": _PID_23},
        "PV1": {"desc": "Patient Visit", "fields": _PV1_23},
        "NK1": {"desc": "Next of Kin / Associated Parties", "fields": _NK1_23},
        "AL1": {"desc": "Patient Allergy Information", "fields": _AL1_23},
        "DG1": {"desc": "Diagnosis", "fields": _DG1_23},
        "OBX": {"desc": "Observation/Result", "fields": _OBX_23},
        "NTE": {"desc": "Notes and Comments", "fields": _NTE_23},
    },
    "2.5": {
        "MSH": {
            "desc": "Message Header",
            "fields": _with_optionality(_MSH_23, required=(7,))
            + [("Alternate Character Set Handling Scheme", O), ("Message Profile Identifier", O)],
        },
        "EVN": {"desc": "Event Type", "fields": _EVN_23 + [("Event Facility", O)]},
        "PID": {
            "desc": "Patient Identification",
            "fields": _PID_23
            + [
                ("Identity Unknown Indicator", O),
                ("Identity Reliability Code", O),
                ("Last Update Date/Time", O),
                ("Last Update Facility", O),
                ("Species Code", O),
                ("Breed Code", O),
                ("Strain", O),
                ("Production Class Code", O),
                ("Tribal Citizenship", O),
            ],
        },
        "PV1": {"desc": "Patient Visit", "fields": _PV1_23},
        "NK1": {
            "desc": "Next of Kin / Associated Parties",
            "fields": _NK1_23 + [("Next of Kin Birth Place", O), ("VIP Indicator", O)],
        },
        "AL1": {"desc": "Patient Allergy Information", "fields": _AL1_23},
        "DG1": {
            "desc": "Diagnosis",
            "fields": _with_optionality(_DG1_23, optional=(2,))
            + [("Diagnosis Identifier", O), ("Diagnosis Action Code", O)],
        },
        "OBX": {
            "desc": "Observation/Result",
            "fields": _OBX_23 + [("Equipment Instance Identifier", O), ("Date/Time of the Analysis", O)],
        },
        "NTE": {"desc": "Notes and Comments", "fields": _NTE_23 + [("Comment Type", O)]},
    },
}
