"""
Tests for the hierarchy model, the mock provider and the file-type projection.
"""

import pytest
from pydantic import ValidationError

from driveoptima.schemas.hierarchy import Folder, Hierarchy
from driveoptima.services.hierarchy import (
    MOCK_FILES,
    MOCK_FOLDERS,
    MockHierarchyProvider,
    classify_mime_type,
    file_type_distribution,
)


def make_folder(folder_id, parent_id, owned=True):
    return {"id": folder_id, "name": folder_id.title(), "parentId": parent_id, "ownedByMe": owned}


def make_file(file_id, folder_id, mime_type="text/plain"):
    return {
        "id": file_id,
        "name": f"{file_id}.txt",
        "mimeType": mime_type,
        "parentFolderId": folder_id,
        "createdTime": "2024-01-01T00:00:00Z",
        "modifiedTime": "2024-01-02T00:00:00Z",
        "contentSummary": "Notes",
        "size": "1KB",
        "ownedByMe": True,
    }


class TestMockHierarchyProvider:
    """Tests for the sample drive"""

    def test_fixture_shape(self, hierarchy):
        """Seven folders and six files"""
        assert len(hierarchy.folders) == 7
        assert len(hierarchy.files) == 6
        assert hierarchy.root.id == "root"
        assert hierarchy.root.name == "My Drive"

    def test_no_dangling_references(self, hierarchy):
        """Every parent reference resolves to an existing folder"""
        folder_ids = {folder.id for folder in hierarchy.folders}

        for folder in hierarchy.folders:
            assert folder.parent_id is None or folder.parent_id in folder_ids
        for file in hierarchy.files:
            assert file.parent_folder_id in folder_ids

    def test_generate_is_deterministic(self):
        """Two calls return equal snapshots"""
        provider = MockHierarchyProvider()
        assert provider.generate() == provider.generate()

    def test_shared_folder_not_owned(self, hierarchy):
        """f6 and its file are the only entities not owned"""
        not_owned_folders = [folder.id for folder in hierarchy.folders if not folder.owned_by_me]
        not_owned_files = [file.id for file in hierarchy.files if not file.owned_by_me]

        assert not_owned_folders == ["f6"]
        assert not_owned_files == ["file6"]
        assert hierarchy.file_by_id("file6").parent_folder_id == "f6"

    def test_nested_folder_depth(self, hierarchy):
        """Old Invoices sits below Invoices"""
        assert hierarchy.path_of_folder("f5") == "My Drive/Invoices/Old Invoices"
        assert hierarchy.path_of_file("file2") == "My Drive/Unorganized stuff/Scan_001.pdf"

    def test_snapshot_is_immutable(self, hierarchy):
        """Ownership flags cannot be changed on a snapshot"""
        with pytest.raises(ValidationError):
            hierarchy.folders[0].owned_by_me = False

    def test_camel_case_serialization(self, hierarchy):
        """Wire format uses the camelCase field names"""
        data = hierarchy.model_dump(mode="json", by_alias=True)

        assert data["folders"][0] == MOCK_FOLDERS[0]
        assert data["files"][0]["parentFolderId"] == MOCK_FILES[0]["parentFolderId"]
        assert data["files"][0]["createdTime"] == "2023-01-15T10:00:00Z"
        assert data["files"][5]["ownedByMe"] is False


class TestHierarchyValidation:
    """Tests for tree invariants enforced at construction"""

    def test_valid_tree(self):
        hierarchy = Hierarchy.model_validate({
            "folders": [make_folder("root", None), make_folder("a", "root"), make_folder("b", "a")],
            "files": [make_file("x", "b")],
        })
        assert hierarchy.path_of_file("x") == "Root/A/B/x.txt"

    def test_duplicate_folder_ids(self):
        with pytest.raises(ValidationError, match="Folder ids must be unique"):
            Hierarchy.model_validate({
                "folders": [make_folder("root", None), make_folder("a", "root"), make_folder("a", "root")],
                "files": [],
            })

    def test_duplicate_file_ids(self):
        with pytest.raises(ValidationError, match="File ids must be unique"):
            Hierarchy.model_validate({
                "folders": [make_folder("root", None)],
                "files": [make_file("x", "root"), make_file("x", "root")],
            })

    def test_dangling_folder_parent(self):
        with pytest.raises(ValidationError, match="unknown parent"):
            Hierarchy.model_validate({
                "folders": [make_folder("root", None), make_folder("a", "missing")],
                "files": [],
            })

    def test_dangling_file_parent(self):
        with pytest.raises(ValidationError, match="unknown folder"):
            Hierarchy.model_validate({
                "folders": [make_folder("root", None)],
                "files": [make_file("x", "missing")],
            })

    def test_missing_root(self):
        with pytest.raises(ValidationError, match="exactly one root"):
            Hierarchy.model_validate({
                "folders": [make_folder("a", "b"), make_folder("b", "a")],
                "files": [],
            })

    def test_two_roots(self):
        with pytest.raises(ValidationError, match="exactly one root"):
            Hierarchy.model_validate({
                "folders": [make_folder("root", None), make_folder("other", None)],
                "files": [],
            })

    def test_cycle_below_root(self):
        with pytest.raises(ValidationError, match="cycle"):
            Hierarchy.model_validate({
                "folders": [make_folder("root", None), make_folder("a", "b"), make_folder("b", "a")],
                "files": [],
            })

    def test_unknown_lookups(self, hierarchy):
        assert hierarchy.folder_by_id("nope") is None
        assert hierarchy.file_by_id("nope") is None
        with pytest.raises(KeyError):
            hierarchy.path_of_file("nope")


class TestFileTypeDistribution:
    """Tests for the file-type projection"""

    def test_sample_drive_buckets(self, hierarchy):
        """Buckets follow first-seen order and sum to the file count"""
        buckets = file_type_distribution(hierarchy)

        assert [(bucket.name, bucket.value) for bucket in buckets] == [
            ("Docs", 2),
            ("PDF", 1),
            ("Text", 1),
            ("Images", 1),
            ("Sheets", 1),
        ]
        assert sum(bucket.value for bucket in buckets) == len(hierarchy.files)

    def test_projection_is_idempotent(self, hierarchy):
        assert file_type_distribution(hierarchy) == file_type_distribution(hierarchy)

    @pytest.mark.parametrize("mime_type,bucket", [
        ("application/vnd.google-apps.document", "Docs"),
        ("application/msword", "Docs"),
        ("application/pdf", "PDF"),
        ("image/png", "Images"),
        ("image/jpeg", "Images"),
        ("application/vnd.google-apps.spreadsheet", "Sheets"),
        ("application/vnd.ms-excel", "Sheets"),
        ("text/plain", "Text"),
        ("text/csv", "Text"),
        ("application/vnd.google-apps.folder", "Folders"),
        ("application/zip", "Other"),
        ("video/mp4", "Other"),
    ])
    def test_mime_type_mapping(self, mime_type, bucket):
        assert classify_mime_type(mime_type) == bucket

    def test_unmatched_types_counted_as_other(self):
        hierarchy = Hierarchy.model_validate({
            "folders": [make_folder("root", None)],
            "files": [make_file("a", "root", "application/zip"), make_file("b", "root", "audio/mpeg")],
        })

        buckets = file_type_distribution(hierarchy)

        assert [(bucket.name, bucket.value) for bucket in buckets] == [("Other", 2)]

    def test_empty_drive(self):
        hierarchy = Hierarchy(folders=[Folder(id="root", name="My Drive", owned_by_me=True)], files=[])
        assert file_type_distribution(hierarchy) == []
