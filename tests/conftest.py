import pytest

from driveoptima.schemas.report import OptimizationReport
from driveoptima.services.hierarchy import MockHierarchyProvider


@pytest.fixture
def hierarchy():
    """The sample drive"""
    return MockHierarchyProvider().generate()


@pytest.fixture
def report_payload():
    """Classifier answer for the sample drive, as raw JSON data"""
    return {
        "summary": "Marketing drafts are duplicated and invoices are scattered.",
        "stats": {"redundantFolders": 1, "misnamedFiles": 2, "potentialSpaceSaved": "28KB"},
        "recommendations": [
            {
                "id": "r1",
                "type": "RENAME",
                "fileId": "file1",
                "currentPath": "My Drive/Drafts 2023/Untitled-1.docx",
                "suggestedName": "Project Pegasus - Marketing Strategy.docx",
                "reasoning": "Name does not describe the content.",
                "impactScore": 90,
            },
            {
                "id": "r2",
                "type": "MOVE",
                "fileId": "file2",
                "currentPath": "My Drive/Unorganized stuff/Scan_001.pdf",
                "suggestedFolderId": "f4",
                "reasoning": "Invoice belongs in Invoices.",
                "impactScore": 75,
            },
            {
                "id": "r3",
                "type": "CONSOLIDATE",
                "folderId": "f5",
                "currentPath": "My Drive/Invoices/Old Invoices",
                "suggestedFolderId": "f4",
                "reasoning": "Old invoices can live with the other invoices.",
                "impactScore": 40,
            },
        ],
    }


@pytest.fixture
def report(report_payload):
    return OptimizationReport.model_validate(report_payload)
