import logging
from typing import Callable, Optional

from joli.core.exceptions import AllocationExhausted, BindConflict
from joli.core.retry import RetryPolicy, perform_with_retry
from joli.modules.join_codes.generator import CODE_LENGTH, generate_code

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10


class CodeCollision(Exception):
    """A freshly generated code is already held by some game."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Join code {code} already exists")


class UniqueCodeAllocator:
    """Draws random codes until the store reports one as unused.

    ``is_code_unique`` is the storage lookup (True when no game holds the
    code). Each attempt costs one generator call; the attempt budget is shared
    between collisions seen at lookup time and conflicts reported at bind time.
    """

    def __init__(
        self,
        is_code_unique: Callable[[str], bool],
        length: int = CODE_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        generate: Callable[[int], str] = generate_code,
    ):
        self.is_code_unique = is_code_unique
        self.length = length
        self.max_attempts = max_attempts
        self.generate = generate

    def _policy(self, max_attempts: Optional[int]) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.max_attempts if max_attempts is None else max_attempts)

    def _draw(self, length: int) -> str:
        code = self.generate(length)
        if not self.is_code_unique(code):
            raise CodeCollision(code)
        return code

    def allocate_unique_code(self, length: Optional[int] = None, max_attempts: Optional[int] = None) -> str:
        """Return the first generated code no game currently holds."""
        length = self.length if length is None else length
        policy = self._policy(max_attempts)
        try:
            return perform_with_retry(lambda attempt: self._draw(length), policy, retry_on=(CodeCollision,))
        except CodeCollision:
            logger.warning(f"Join code allocation exhausted after {policy.max_attempts} attempts")
            raise AllocationExhausted(policy.max_attempts)

    def allocate_and_bind(
        self,
        bind: Callable[[str], None],
        length: Optional[int] = None,
        max_attempts: Optional[int] = None,
    ) -> str:
        """Allocate a code and hand it to ``bind``; retry on collisions and bind conflicts.

        ``bind`` raises BindConflict when the storage unique constraint rejects
        the code, which happens when another allocation bound it after our lookup.
        """
        length = self.length if length is None else length
        policy = self._policy(max_attempts)

        def attempt(number: int) -> str:
            code = self._draw(length)
            try:
                bind(code)
            except BindConflict:
                logger.info(f"Join code {code} was taken before bind (attempt {number}), retrying")
                raise
            return code

        try:
            return perform_with_retry(attempt, policy, retry_on=(CodeCollision, BindConflict))
        except (CodeCollision, BindConflict):
            logger.warning(f"Join code allocation exhausted after {policy.max_attempts} attempts")
            raise AllocationExhausted(policy.max_attempts)
