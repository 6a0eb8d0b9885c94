"""
Drive hierarchy providers and projections for DriveOptima.

A provider produces a validated Hierarchy snapshot. The mock provider returns
a fixed sample drive so the dashboard and the analysis flow can run without a
real storage integration; a real listing can be swapped in by implementing
HierarchyProvider.
"""

from typing import Protocol

from driveoptima.schemas.hierarchy import File, FileTypeBucket, Folder, Hierarchy


class HierarchyProvider(Protocol):
    """Source of drive snapshots"""

    def generate(self) -> Hierarchy:
        ...


MOCK_FOLDERS = [
    {"id": "root", "name": "My Drive", "parentId": None, "ownedByMe": True},
    {"id": "f1", "name": "Drafts 2023", "parentId": "root", "ownedByMe": True},
    {"id": "f2", "name": "Work Project Final", "parentId": "root", "ownedByMe": True},
    {"id": "f3", "name": "Unorganized stuff", "parentId": "root", "ownedByMe": True},
    {"id": "f4", "name": "Invoices", "parentId": "root", "ownedByMe": True},
    {"id": "f5", "name": "Old Invoices", "parentId": "f4", "ownedByMe": True},
    # Shared folder, read-only for the signed-in user
    {"id": "f6", "name": "Shared Team Assets", "parentId": "root", "ownedByMe": False},
]

MOCK_FILES = [
    {
        "id": "file1",
        "name": "Untitled-1.docx",
        "mimeType": "application/vnd.google-apps.document",
        "parentFolderId": "f1",
        "createdTime": "2023-01-15T10:00:00Z",
        "modifiedTime": "2023-01-15T10:00:00Z",
        "contentSummary": "This document contains the marketing strategy for Project Pegasus. "
                          "It outlines the budget of $50,000 and the launch date in Q4.",
        "size": "25KB",
        "ownedByMe": True,
    },
    {
        "id": "file2",
        "name": "Scan_001.pdf",
        "mimeType": "application/pdf",
        "parentFolderId": "f3",
        "createdTime": "2024-05-20T14:30:00Z",
        "modifiedTime": "2024-05-20T14:30:00Z",
        "contentSummary": "Invoice #INV-9928 from Acme Corp for Cloud Services. "
                          "Amount due: $1,200. Date: May 15, 2024.",
        "size": "1.2MB",
        "ownedByMe": True,
    },
    {
        "id": "file3",
        "name": "meeting_notes_v2.txt",
        "mimeType": "text/plain",
        "parentFolderId": "f2",
        "createdTime": "2023-11-05T09:00:00Z",
        "modifiedTime": "2023-11-05T11:45:00Z",
        "contentSummary": "Notes from the client meeting regarding Project Pegasus. "
                          "Discussed rebranding and logo design iterations.",
        "size": "5KB",
        "ownedByMe": True,
    },
    {
        "id": "file4",
        "name": "Backup_copy_final_final.docx",
        "mimeType": "application/vnd.google-apps.document",
        "parentFolderId": "f3",
        "createdTime": "2023-02-10T16:00:00Z",
        "modifiedTime": "2023-02-12T10:00:00Z",
        "contentSummary": "Finalized marketing plan for Pegasus Project. "
                          "Same as Untitled-1 but with minor edits on the timeline.",
        "size": "28KB",
        "ownedByMe": True,
    },
    {
        "id": "file5",
        "name": "Receipt.jpg",
        "mimeType": "image/jpeg",
        "parentFolderId": "f3",
        "createdTime": "2024-06-01T12:00:00Z",
        "modifiedTime": "2024-06-01T12:00:00Z",
        "contentSummary": "Receipt for team lunch at Italian Bistro. "
                          "Amount: $85.50. Project: Team Building.",
        "size": "450KB",
        "ownedByMe": True,
    },
    {
        "id": "file6",
        "name": "Q3_Financials_Shared.xlsx",
        "mimeType": "application/vnd.google-apps.spreadsheet",
        "parentFolderId": "f6",
        "createdTime": "2024-07-01T09:00:00Z",
        "modifiedTime": "2024-07-05T16:00:00Z",
        "contentSummary": "Shared financial report from the Finance Dept. Read-only access.",
        "size": "1.5MB",
        "ownedByMe": False,
    },
]


class MockHierarchyProvider:
    """
    Fixed sample drive used in demo mode.

    The files are chosen to exercise duplicate detection (file1/file4),
    misnaming (Untitled-1, Scan_001) and the ownership rule (f6/file6).
    """

    def generate(self) -> Hierarchy:
        """
        Build the sample hierarchy.

        Returns:
            Hierarchy: A fresh, validated snapshot
        """
        return Hierarchy(
            folders=[Folder.model_validate(folder) for folder in MOCK_FOLDERS],
            files=[File.model_validate(file) for file in MOCK_FILES],
        )


# Ordered (bucket, substrings) table; first match wins
FILE_TYPE_RULES = [
    ("Docs", ("document", "word")),
    ("PDF", ("pdf",)),
    ("Images", ("image", "jpeg", "png")),
    ("Sheets", ("sheet", "excel")),
    ("Text", ("text",)),
    ("Folders", ("folder",)),
]


def classify_mime_type(mime_type: str) -> str:
    """
    Map a MIME type to its dashboard bucket.

    Args:
        mime_type: MIME type reported for a file

    Returns:
        Bucket name, "Other" when no rule matches
    """
    for bucket, needles in FILE_TYPE_RULES:
        if any(needle in mime_type for needle in needles):
            return bucket
    return "Other"


def file_type_distribution(hierarchy: Hierarchy) -> list[FileTypeBucket]:
    """
    Count files per type bucket.

    Buckets are listed in the order they are first seen in the file list,
    and their values sum to the number of files.

    Args:
        hierarchy: Snapshot to project

    Returns:
        List of FileTypeBucket
    """
    counts: dict[str, int] = {}
    for file in hierarchy.files:
        bucket = classify_mime_type(file.mime_type)
        counts[bucket] = counts.get(bucket, 0) + 1
    return [FileTypeBucket(name=name, value=value) for name, value in counts.items()]
