from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class DriveModel(BaseModel):
    """Immutable value object serialized with camelCase keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Folder(DriveModel):
    """Folder in the drive hierarchy"""
    id: str
    name: str
    parent_id: Optional[str] = None
    owned_by_me: bool


class File(DriveModel):
    """File in the drive hierarchy"""
    id: str
    name: str
    mime_type: str
    parent_folder_id: str
    created_time: datetime
    modified_time: datetime
    content_summary: str
    size: str
    owned_by_me: bool


class Hierarchy(DriveModel):
    """
    Complete folder/file snapshot of a drive.

    Construction fails with a ValidationError when ids collide, a parent
    reference dangles, there is not exactly one root folder, or the folder
    tree contains a cycle.
    """
    folders: list[Folder]
    files: list[File]

    @model_validator(mode="after")
    def check_tree(self) -> "Hierarchy":
        folder_ids = [folder.id for folder in self.folders]
        if len(set(folder_ids)) != len(folder_ids):
            raise ValueError("Folder ids must be unique")

        file_ids = [file.id for file in self.files]
        if len(set(file_ids)) != len(file_ids):
            raise ValueError("File ids must be unique")

        roots = [folder for folder in self.folders if folder.parent_id is None]
        if len(roots) != 1:
            raise ValueError(f"Hierarchy must have exactly one root folder, found {len(roots)}")

        known = set(folder_ids)
        for folder in self.folders:
            if folder.parent_id is not None and folder.parent_id not in known:
                raise ValueError(f"Folder {folder.id} references unknown parent {folder.parent_id}")

        for file in self.files:
            if file.parent_folder_id not in known:
                raise ValueError(f"File {file.id} references unknown folder {file.parent_folder_id}")

        parents = {folder.id: folder.parent_id for folder in self.folders}
        for folder_id in folder_ids:
            seen = set()
            current = folder_id
            while current is not None:
                if current in seen:
                    raise ValueError(f"Folder {folder_id} is part of a cycle")
                seen.add(current)
                current = parents[current]

        return self

    @property
    def root(self) -> Folder:
        return next(folder for folder in self.folders if folder.parent_id is None)

    def folder_by_id(self, folder_id: str) -> Optional[Folder]:
        for folder in self.folders:
            if folder.id == folder_id:
                return folder
        return None

    def file_by_id(self, file_id: str) -> Optional[File]:
        for file in self.files:
            if file.id == file_id:
                return file
        return None

    def path_of_folder(self, folder_id: str) -> str:
        """Slash-joined folder names from the root down, e.g. "My Drive/Invoices"."""
        names = []
        folder = self.folder_by_id(folder_id)
        if folder is None:
            raise KeyError(folder_id)
        while folder is not None:
            names.append(folder.name)
            folder = self.folder_by_id(folder.parent_id) if folder.parent_id else None
        return "/".join(reversed(names))

    def path_of_file(self, file_id: str) -> str:
        file = self.file_by_id(file_id)
        if file is None:
            raise KeyError(file_id)
        return f"{self.path_of_folder(file.parent_folder_id)}/{file.name}"


class FileTypeBucket(BaseModel):
    """One slice of the file-type distribution chart"""
    name: str
    value: int
