"""
Analysis client for DriveOptima.

Serializes a drive hierarchy into a prompt, asks Gemini for a structured
OptimizationReport and validates the answer. The Classifier protocol is the
seam between the session service and the AI service, so tests and offline
runs can substitute StaticClassifier for the live GeminiClassifier.
"""

import json
import logging
import time
from typing import List, Optional, Protocol

from google import genai
from google.genai import types
from pydantic import ValidationError

from driveoptima.schemas.hierarchy import Hierarchy
from driveoptima.schemas.report import AnalysisMode, OptimizationReport, Recommendation, RecommendationType

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-pro-preview"


class ClassifierError(Exception):
    """Base class for failures raised by the analysis client"""


class ClassifierConfigurationError(ClassifierError):
    """The classifier cannot run, e.g. the API key is missing"""


class ClassifierSchemaError(ClassifierError):
    """The classifier answered with nothing, or with something that is not a report"""


class Classifier(Protocol):
    """Capability that turns a hierarchy into an optimization report"""

    async def analyze(self, hierarchy: Hierarchy, mode: AnalysisMode) -> OptimizationReport:
        ...


SYSTEM_PROMPT = """\
You are an expert Digital Librarian and File System Architect.
Your task is to analyze a Google Drive structure and provide optimization recommendations.

CRITICAL CRITERIA:
1. CONSOLIDATION: Identify folders that should be merged because their contents overlap or duplicate each other.
2. RENAMING: Suggest clear, standard names for poorly named files (e.g., "Untitled-1" becomes "Project Pegasus - Marketing Strategy").
3. REMAPPING: Suggest moving files to more logical locations (e.g., invoices to an 'Invoices' folder).
4. REDUNDANCY: Detect duplicate or near-duplicate content even if names differ, and reflect it in the stats and in CONSOLIDATE or ARCHIVE suggestions.

IMPORTANT PERMISSION RULES:
- You will receive a list of files and folders with an "ownedByMe" property.
- You MUST NOT generate any recommendations (RENAME, MOVE, CONSOLIDATE, ARCHIVE) for any file or folder where "ownedByMe" is false.
- These shared items are for context only. For example, you can recommend moving an owned file INTO a shared folder, but you cannot rename the shared folder or move files out of it if you don't own them.

Mode: {mode}
"""

MODE_DESCRIPTIONS = {
    AnalysisMode.WEEKLY: "Weekly Checkup (focus on recently modified items)",
    AnalysisMode.DEEP: "Full Initial Deep Dive (scan every file and folder)",
}

USER_PROMPT = """\
Current File/Folder Hierarchy:
Folders: {folders}
Files: {files}

Analyze the contents and provide an OptimizationReport in JSON format.
"""

RESPONSE_SCHEMA = {
    "type": types.Type.OBJECT,
    "properties": {
        "summary": {"type": types.Type.STRING},
        "stats": {
            "type": types.Type.OBJECT,
            "properties": {
                "redundantFolders": {"type": types.Type.INTEGER},
                "misnamedFiles": {"type": types.Type.INTEGER},
                "potentialSpaceSaved": {"type": types.Type.STRING},
            },
            "required": ["redundantFolders", "misnamedFiles", "potentialSpaceSaved"],
        },
        "recommendations": {
            "type": types.Type.ARRAY,
            "items": {
                "type": types.Type.OBJECT,
                "properties": {
                    "id": {"type": types.Type.STRING},
                    "type": {
                        "type": types.Type.STRING,
                        "enum": [kind.value for kind in RecommendationType],
                    },
                    "fileId": {"type": types.Type.STRING},
                    "folderId": {"type": types.Type.STRING},
                    "currentPath": {"type": types.Type.STRING},
                    "suggestedName": {"type": types.Type.STRING},
                    "suggestedFolderId": {"type": types.Type.STRING},
                    "reasoning": {"type": types.Type.STRING},
                    "impactScore": {"type": types.Type.NUMBER},
                },
                "required": ["id", "type", "reasoning", "impactScore"],
            },
        },
    },
    "required": ["summary", "recommendations", "stats"],
}


def build_system_instruction(mode: AnalysisMode) -> str:
    return SYSTEM_PROMPT.format(mode=MODE_DESCRIPTIONS[mode])


def build_user_prompt(hierarchy: Hierarchy) -> str:
    """
    Serialize the full hierarchy for the classifier.

    Every folder and file is included with camelCase keys, ownedByMe
    included, exactly as the schemas serialize them.

    Args:
        hierarchy: Snapshot to analyze

    Returns:
        Prompt text
    """
    data = hierarchy.model_dump(mode="json", by_alias=True)
    return USER_PROMPT.format(
        folders=json.dumps(data["folders"]),
        files=json.dumps(data["files"]),
    )


def parse_report(text: Optional[str]) -> OptimizationReport:
    """
    Validate the classifier's raw answer.

    Args:
        text: Response body returned by the model

    Returns:
        OptimizationReport

    Raises:
        ClassifierSchemaError: Empty body, invalid JSON, or a payload that does
            not match the report schema
    """
    if not text:
        raise ClassifierSchemaError("No text content generated by the classifier")
    try:
        return OptimizationReport.model_validate_json(text)
    except ValidationError as e:
        raise ClassifierSchemaError(f"Classifier response does not match the report schema: {e}") from e


def ownership_violations(hierarchy: Hierarchy, report: OptimizationReport) -> List[Recommendation]:
    """
    Find recommendations that act on entities the user does not own.

    The file or folder a recommendation changes (fileId/folderId) must exist
    and be owned. The destination of a MOVE (suggestedFolderId) may be a
    shared folder.

    Args:
        hierarchy: Snapshot the report was produced for
        report: Classifier output

    Returns:
        Offending recommendations, in report order
    """
    violations = []
    for rec in report.recommendations:
        targets = []
        if rec.file_id is not None:
            targets.append(hierarchy.file_by_id(rec.file_id))
        if rec.folder_id is not None:
            targets.append(hierarchy.folder_by_id(rec.folder_id))
        if any(target is None or not target.owned_by_me for target in targets):
            violations.append(rec)
    return violations


class GeminiClassifier:
    """
    Classifier backed by the Gemini API.

    The API key is checked on every call rather than at construction so that
    the rest of the application stays usable without it.
    """

    def __init__(self, api_key: Optional[str], model: str = DEFAULT_MODEL):
        self.api_key = api_key
        self.model = model
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> genai.Client:
        """SDK client, built on first use and reused for every later call"""
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def analyze(self, hierarchy: Hierarchy, mode: AnalysisMode) -> OptimizationReport:
        """
        Send the hierarchy to Gemini and return the validated report.

        Args:
            hierarchy: Snapshot to analyze
            mode: Deep or weekly scope hint

        Returns:
            OptimizationReport

        Raises:
            ClassifierConfigurationError: No API key configured
            ClassifierSchemaError: Empty or malformed response
            Exception: Any SDK or transport error, unchanged
        """
        if not self.api_key:
            raise ClassifierConfigurationError("Gemini API Key is required for analysis.")

        start_time = time.time()
        logger.info(f"Analyzing {len(hierarchy.files)} files with {self.model} ({mode.value})")

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=build_user_prompt(hierarchy),
                config=types.GenerateContentConfig(
                    system_instruction=build_system_instruction(mode),
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                ),
            )
            report = parse_report(response.text)
        except Exception as e:
            logger.error(f"Gemini analysis failed: {e}")
            raise

        process_time = (time.time() - start_time) * 1000  # ms
        logger.info(
            f"Analysis returned {len(report.recommendations)} recommendations in {process_time:.2f}ms"
        )
        return report


class StaticClassifier:
    """
    Deterministic classifier returning a fixed report or raising a fixed error.

    Used by tests and by offline demo runs.
    """

    def __init__(self, report: Optional[OptimizationReport] = None, error: Optional[Exception] = None):
        self.report = report
        self.error = error
        self.calls: List[AnalysisMode] = []

    async def analyze(self, hierarchy: Hierarchy, mode: AnalysisMode) -> OptimizationReport:
        self.calls.append(mode)
        if self.error is not None:
            raise self.error
        if self.report is None:
            raise ClassifierSchemaError("No report configured")
        return self.report


def demo_report() -> OptimizationReport:
    """Fixed report for the sample drive, served by the offline classifier."""
    return OptimizationReport.model_validate({
        "summary": "Your drive mixes drafts, invoices and receipts in a catch-all folder. "
                   "Two marketing documents for Project Pegasus are near-duplicates.",
        "stats": {"redundantFolders": 1, "misnamedFiles": 3, "potentialSpaceSaved": "25KB"},
        "recommendations": [
            {
                "id": "rec1",
                "type": "RENAME",
                "fileId": "file1",
                "currentPath": "My Drive/Drafts 2023/Untitled-1.docx",
                "suggestedName": "Project Pegasus - Marketing Strategy.docx",
                "reasoning": "The document describes the Project Pegasus marketing strategy.",
                "impactScore": 85,
            },
            {
                "id": "rec2",
                "type": "MOVE",
                "fileId": "file2",
                "currentPath": "My Drive/Unorganized stuff/Scan_001.pdf",
                "suggestedFolderId": "f4",
                "reasoning": "This scan is an Acme Corp invoice and belongs with the other invoices.",
                "impactScore": 70,
            },
            {
                "id": "rec3",
                "type": "ARCHIVE",
                "fileId": "file4",
                "currentPath": "My Drive/Unorganized stuff/Backup_copy_final_final.docx",
                "reasoning": "Near-duplicate of Untitled-1 with minor timeline edits.",
                "impactScore": 60,
            },
            {
                "id": "rec4",
                "type": "CONSOLIDATE",
                "folderId": "f5",
                "currentPath": "My Drive/Invoices/Old Invoices",
                "suggestedFolderId": "f4",
                "reasoning": "A separate folder for old invoices fragments a small invoice archive.",
                "impactScore": 45,
            },
        ],
    })
