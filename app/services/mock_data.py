"""
Seed data for the in-memory QC backend.

Used when USE_MOCK_API is enabled and by the test suite.
"""

MOCK_PENDING_JOBS = [
    {
        "id": "QC-2025-001",
        "grn_no": "MES-25-IN-00041",
        "grn_date": "2025-10-10",
        "po_no": "PH/HO-25-07725",
        "ir_no": "SYN-0114",
        "supplier": {"code": "SC001540", "name": "M/s Sri Sakthi Ganesh Casting Works, Chennai"},
        "product": {"code": "DSYN-090-DP", "name": "Aluminium Casting Handle - DP", "category": "Raw Material"},
        "lot_size": 60,
        "sample_size": 10,
        "priority": "high",
        "status": "pending",
        "created_at": "2025-10-10T08:30:00Z",
        "due_date": "2025-10-11T17:00:00Z",
    },
    {
        "id": "QC-2025-002",
        "grn_no": "MES-25-IN-00042",
        "grn_date": "2025-10-10",
        "po_no": "PH/HO-25-07730",
        "ir_no": "SYN-0115",
        "supplier": {"code": "SC001542", "name": "Precision Components Pvt Ltd, Bangalore"},
        "product": {"code": "AAT-9002", "name": "Phaco Handpiece Orbit", "category": "Finished Goods"},
        "lot_size": 39,
        "sample_size": 39,
        "priority": "medium",
        "status": "pending",
        "created_at": "2025-10-10T09:15:00Z",
        "due_date": "2025-10-12T17:00:00Z",
    },
    {
        "id": "QC-2025-004",
        "grn_no": "MES-25-IN-00040",
        "grn_date": "2025-10-08",
        "po_no": "PH/HO-25-07720",
        "ir_no": "SYN-0110",
        "supplier": {"code": "SC001535", "name": "Steel Tubes India, Coimbatore"},
        "product": {"code": "STL-3020", "name": "Stainless Steel Tube 3mm", "category": "Raw Material"},
        "lot_size": 500,
        "sample_size": 50,
        "priority": "low",
        "status": "completed",
        "created_at": "2025-10-08T10:00:00Z",
        "completed_at": "2025-10-08T16:30:00Z",
        "pass_rate": 98,
    },
]


MOCK_JOB_DETAILS = {
    "QC-2025-001": {
        "id": "QC-2025-001",
        "grn_no": "MES-25-IN-00041",
        "po_no": "PH/HO-25-07725",
        "ir_no": "SYN-0114",
        "ir_date": "2025-10-10",
        "supplier": {"code": "SC001540", "name": "M/s Sri Sakthi Ganesh Casting Works, Chennai"},
        "product": {"code": "DSYN-090-DP", "name": "Aluminium Casting Handle - DP"},
        "lot_size": 60,
        "sample_size": 10,
        "quality_plan_no": "MQP-SYN-03",
        "imte_id": "AT ELE 0102 (Vernier)",
        "checkpoints": [
            {
                "id": 1,
                "name": "Height",
                "instrument": "Vernier",
                "spec_text": "94mm",
                "tolerance_text": "±0.5mm",
                "input_type": "measurement",
                "unit": "mm",
                "nominal_value": 94,
                "upper_limit": 94.5,
                "lower_limit": 93.5,
                "qc_file_id": "QC-FILE-001",
                "qc_file_url": "/files/qc-parameters/height-measurement.pdf",
            },
            {
                "id": 2,
                "name": "Thickness-1",
                "instrument": "Vernier",
                "spec_text": "29mm",
                "tolerance_text": "±0.3mm",
                "input_type": "measurement",
                "unit": "mm",
                "nominal_value": 29,
                "upper_limit": 29.3,
                "lower_limit": 28.7,
                "qc_file_id": "QC-FILE-002",
                "qc_file_url": "/files/qc-parameters/thickness-1-measurement.pdf",
            },
            {
                "id": 3,
                "name": "Thickness-2",
                "instrument": "Vernier",
                "spec_text": "12mm",
                "tolerance_text": "±0.2mm",
                "input_type": "measurement",
                "unit": "mm",
                "nominal_value": 12,
                "upper_limit": 12.2,
                "lower_limit": 11.8,
                "qc_file_id": "QC-FILE-003",
                "qc_file_url": "/files/qc-parameters/thickness-2-measurement.pdf",
            },
        ],
    },
    "QC-2025-002": {
        "id": "QC-2025-002",
        "grn_no": "MES-25-IN-00042",
        "po_no": "PH/HO-25-07730",
        "ir_no": "SYN-0115",
        "ir_date": "2025-10-10",
        "supplier": {"code": "SC001542", "name": "Precision Components Pvt Ltd, Bangalore"},
        "product": {"code": "AAT-9002", "name": "Phaco Handpiece Orbit"},
        "lot_size": 39,
        "sample_size": 39,
        "quality_plan_no": "RD-7.3-07-A12",
        "imte_id": "Visual & Jig-08",
        "checkpoints": [
            {
                "id": 1,
                "name": "Thread Condition Check",
                "instrument": "Visual",
                "spec_text": "No Damage",
                "tolerance_text": "-",
                "input_type": "yesno",
            },
            {
                "id": 2,
                "name": "LuerLock Connector HP Check",
                "instrument": "Visual",
                "spec_text": "Proper Fit",
                "tolerance_text": "-",
                "input_type": "yesno",
            },
            {
                "id": 3,
                "name": "Irrigation Flow Checking",
                "instrument": "Jig-08",
                "spec_text": "Flow OK",
                "tolerance_text": "-",
                "input_type": "yesno",
                "qc_file_id": "QC-FILE-FLOW",
                "qc_file_url": "/files/qc-parameters/irrigation-flow.pdf",
            },
            {
                "id": 4,
                "name": "Block in Irrigation Path",
                "instrument": "Jig-08",
                "spec_text": "No Block",
                "tolerance_text": "-",
                "input_type": "yesno",
            },
            {
                "id": 5,
                "name": "Quantity Verification",
                "instrument": "Visual",
                "spec_text": "39 Nos",
                "tolerance_text": "-",
                "input_type": "both",
                "unit": "Nos",
            },
        ],
    },
}
