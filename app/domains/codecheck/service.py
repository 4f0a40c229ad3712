"""Code check service: reviews code against requirements with Gemini and
files the resulting checklist in Todoist."""

import logging
from typing import Any

import httpx

from app.core.config import Settings
from app.exceptions.ai import AIServiceError
from app.exceptions.base import BadRequestError, ConfigurationError
from app.exceptions.todoist import TodoistAPIError
from app.services.gemini_client import GeminiClient
from app.services.todoist_client import make_request_id

logger = logging.getLogger(__name__)

MAX_CHECKLIST_ITEMS = 30

CHECKLIST_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Text Summary Checklist",
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "checklist": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "itemDescription": {"type": "string"},
                    "isCompleted": {"type": "boolean", "default": False},
                },
                "required": ["itemDescription", "isCompleted"],
                "additionalProperties": False,
            },
            "minItems": 1,
            "maxItems": MAX_CHECKLIST_ITEMS,
        },
    },
    "required": ["summary", "checklist"],
    "additionalProperties": False,
}

ANALYSIS_COMPLETE_MESSAGE = "Code analyzed, checklist generated, and tasks created in Todoist."
NEXT_STEP_MESSAGE = "Check your Todoist account for the generated tasks based on the analysis."


def build_checklist_prompt(requirements: str, code: str) -> str:
    """Build the review prompt; both inputs are embedded verbatim."""
    return f"""
You are an expert AI Assistant specializing in code review and checklist generation based on provided technical requirements. Your primary role is to evaluate a user's code against a given set of exam requirements.

For each individual requirement, you must meticulously analyze the 'User Code' to determine whether that specific requirement has been completely and correctly implemented.

The output must be a JSON object, strictly adhering to the JSON schema provided to you, which includes a 'summary' of your overall assessment and a 'checklist' array.

For each item in the 'checklist' array:
- 'itemDescription': The exact text of the requirement from the 'Exam Requirements' list.
- 'isCompleted': 'true' if the 'User Code' demonstrably fulfills this specific requirement, 'false' if the requirement is incomplete, incorrect, or entirely missing from the code.
- 'details': A concise explanation justifying the 'isCompleted' assessment. If 'isCompleted' is true, describe how the code fulfills it. If 'isCompleted' is false, explain what is missing or incorrect.

---
Exam Requirements:
{requirements}

User Code:
```
{code}
```

Task: Analyze the 'User Code' against each 'Exam Requirement' and generate a JSON checklist with at least 1 and at most {MAX_CHECKLIST_ITEMS} items. Ensure the 'isCompleted' status and 'details' are accurate based on the code provided.

Response format:
{{
  "summary": "A concise overall summary of how well the provided code fulfills the exam requirements.",
  "checklist": [
    {{
      "itemDescription": "Requirement text exactly as written in Exam Requirements",
      "isCompleted": true,
      "details": "Specific explanation of implementation or what's missing."
    }}
  ]
}}
""".strip()


def _error_message(resp: httpx.Response) -> str | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    return body.get("message") if isinstance(body, dict) else None


def _is_blank_text(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


class CodeCheckService:
    """Runs a code check end to end.

    The AI client is built on first use, after the inputs and the Todoist
    credential have been checked. ``transport`` lets tests route the task
    creation call back into the in-process app.
    """

    def __init__(
        self,
        settings: Settings,
        ai_client: GeminiClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self._ai_client = ai_client
        self._transport = transport

    @property
    def ai_client(self) -> GeminiClient:
        if self._ai_client is None:
            self._ai_client = GeminiClient(self.settings)
        return self._ai_client

    def validate_input(self, requirements: Any, code: Any) -> None:
        if _is_blank_text(requirements):
            raise BadRequestError("Exam requirements text is required and cannot be empty.")
        if _is_blank_text(code):
            raise BadRequestError("User code snippet is required and cannot be empty.")
        if not self.settings.todoist_api_key:
            logger.error("CRITICAL ERROR: TODOIST_API_KEY is not defined in environment variables.")
            raise ConfigurationError(
                "Server configuration error: Todoist API key is missing. Please contact support.",
                status_code=400,
            )

    async def submit_requirements(self, requirements: Any, code: Any) -> dict[str, Any]:
        """Analyze ``code`` against ``requirements`` and file the checklist."""
        self.validate_input(requirements, code)

        prompt = build_checklist_prompt(requirements, code)
        simplified_checklist = await self.ai_client.generate_structured(prompt, CHECKLIST_SCHEMA)
        if not isinstance(simplified_checklist, dict):
            raise AIServiceError("AI backend returned an unexpected checklist format")

        task_payload = {
            "message": simplified_checklist.get("summary"),
            "simplifiedChecklist": {
                "checklist": simplified_checklist.get("checklist"),
                "summary": simplified_checklist.get("summary"),
            },
        }
        created = await self._create_tasks(task_payload)
        logger.info(f"Code check filed {len(created.get('createdTasks', []))} Todoist tasks")

        return {
            "message": ANALYSIS_COMPLETE_MESSAGE,
            "simplifiedChecklist": simplified_checklist,
            "next": NEXT_STEP_MESSAGE,
        }

    async def _create_tasks(self, task_payload: dict[str, Any]) -> dict[str, Any]:
        """POST the checklist to this service's own ``/api/todoist/create`` endpoint."""
        url = f"{self.settings.internal_api_base_url}/api/todoist/create"
        headers = {
            "Authorization": f"Bearer {self.settings.todoist_api_key}",
            "Content-Type": "application/json",
            "X-Request-Id": make_request_id("codecheck"),
        }
        async with httpx.AsyncClient(
            timeout=self.settings.todoist_request_timeout, transport=self._transport
        ) as client:
            resp = await client.post(url, json=task_payload, headers=headers)

        if resp.is_error:
            message = _error_message(resp)
            logger.error(f"Task creation call failed with status {resp.status_code}: {message}")
            raise TodoistAPIError(
                message=message or "Failed to create tasks in Todoist.",
                status_code=resp.status_code,
            )
        return resp.json()
