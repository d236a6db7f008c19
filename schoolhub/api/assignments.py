"""Coursework assignments and their submissions."""

from typing import Any, Dict, List, Optional

from ..models import Assignment, Submission
from .base import BaseApi, clean_payload, parse_item, parse_list, unwrap_item, unwrap_key

TEACHER_ASSIGNMENTS_PATH = "/teacher/assignments"
STUDENT_ASSIGNMENTS_PATH = "/student/assignments"


class AssignmentsApi(BaseApi):

	async def list_for_teacher(self, class_id: Optional[str] = None) -> List[Assignment]:
		"""Assignments created by the signed-in teacher, optionally for one class."""
		body = await self.client.get(TEACHER_ASSIGNMENTS_PATH)
		assignments = parse_list(unwrap_key(body, "assignments", []), Assignment.from_dict)
		if class_id:
			return [a for a in assignments if a.class_id == class_id]
		return assignments

	async def create(self, data: Dict[str, Any]) -> Assignment:
		body = await self.client.post(TEACHER_ASSIGNMENTS_PATH, clean_payload(data))
		return parse_item(unwrap_item(body, "assignment"), Assignment.from_dict)

	async def update(self, assignment_id: str, data: Dict[str, Any]) -> Assignment:
		body = await self.client.put(f"{TEACHER_ASSIGNMENTS_PATH}/{assignment_id}", clean_payload(data))
		return parse_item(unwrap_item(body, "assignment"), Assignment.from_dict)

	async def delete(self, assignment_id: str) -> None:
		await self.client.delete(f"{TEACHER_ASSIGNMENTS_PATH}/{assignment_id}")

	async def list_submissions(self, assignment_id: str) -> List[Submission]:
		body = await self.client.get(f"{TEACHER_ASSIGNMENTS_PATH}/{assignment_id}/submissions")
		return parse_list(unwrap_key(body, "submissions", []), Submission.from_dict)

	async def grade_submission(self, submission_id: str, score: float, feedback: Optional[str] = None) -> Submission:
		body = await self.client.put(
			f"/teacher/submissions/{submission_id}/grade",
			clean_payload({"score": score, "feedback": feedback}),
		)
		return parse_item(unwrap_item(body, "submission"), Submission.from_dict)

	async def list_for_student(self) -> List[Assignment]:
		body = await self.client.get(STUDENT_ASSIGNMENTS_PATH)
		return parse_list(unwrap_key(body, "assignments", []), Assignment.from_dict)

	async def submit(self, assignment_id: str, file_url: str, submission_text: Optional[str] = None) -> Submission:
		body = await self.client.post(
			f"{STUDENT_ASSIGNMENTS_PATH}/{assignment_id}/submit",
			clean_payload({"file_url": file_url, "submission_text": submission_text}),
		)
		return parse_item(unwrap_item(body, "submission"), Submission.from_dict)
