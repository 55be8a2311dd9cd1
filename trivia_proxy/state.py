import threading
from typing import Dict, Optional
from .errors import InvalidArgumentError, NullInputError

def _blank(text: Optional[str]) -> bool:
	return text is None or not text.strip()

class AnswerStore:
	"""Correct answers held server-side, keyed by question id.

	An entry is pending from ``store`` until the first ``consume`` for its id,
	which removes it. Entries for questions that are never checked stay for
	the life of the process; there is no expiry.
	"""

	def __init__(self) -> None:
		self._answers: Dict[str, str] = {}
		self._lock = threading.Lock()

	def store(self, question_id: str, correct_answer: str) -> None:
		if question_id is None:
			raise NullInputError("Question ID must not be None.")
		if correct_answer is None:
			raise NullInputError("Correct answer must not be None.")
		if _blank(question_id):
			raise InvalidArgumentError("Question ID must not be empty or whitespace.")
		if _blank(correct_answer):
			raise InvalidArgumentError("Correct answer must not be empty or whitespace.")
		# Re-storing an id replaces the previous answer.
		with self._lock:
			self._answers[question_id] = correct_answer

	def consume(self, question_id: Optional[str]) -> Optional[str]:
		"""Remove and return the answer for ``question_id``; None if absent."""
		if _blank(question_id):
			return None
		with self._lock:
			return self._answers.pop(question_id, None)

	def count(self) -> int:
		with self._lock:
			return len(self._answers)

	def __len__(self) -> int:
		return self.count()
