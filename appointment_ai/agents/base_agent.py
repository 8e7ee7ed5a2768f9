"""
Agent base class.

An agent turns a request context into the {message, data, proofs} envelope
returned by the API. API handlers call execute(); subclasses implement run().
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class BaseAgent:
    """
    Context keys understood by the helpers:
    trace_id, entities, auth_header, user_role, user_id.
    """

    async def execute(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Run the agent; an unexpected exception becomes a failed envelope."""
        try:
            return await self.run(context)
        except Exception as e:
            logger.exception(f"{type(self).__name__} failed: {e}")
            return self.error_response(
                message="I encountered an unexpected error. Please try again.",
                trace_id=self.get_trace_id(context),
                error_type=type(e).__name__
            )

    async def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError(f"{type(self).__name__} must implement run()")

    # ==================== Envelopes ====================

    @staticmethod
    def _envelope(message: str, data: Optional[Dict[str, Any]], trace_id: Optional[str], **proofs) -> Dict[str, Any]:
        envelope_proofs = {"trace_id": trace_id} if trace_id else {}
        envelope_proofs.update(proofs)
        return {"message": message, "data": data, "proofs": envelope_proofs}

    def success_response(
        self,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        trace_id: Optional[str] = None,
        **extra_proofs
    ) -> Dict[str, Any]:
        """Successful envelope; extra_proofs (user_role, algorithm, sources) go into proofs."""
        return self._envelope(message, data, trace_id, status="success", **extra_proofs)

    def validation_error(
        self,
        message: str,
        suggestion: str,
        missing_field: Optional[str] = None,
        example: Optional[str] = None,
        trace_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Failed envelope for bad or missing input, answered with HTTP 400.

        Args:
            message: What is wrong
            suggestion: How to fix it, appended to the message
            missing_field: Offending entity name
            example: Example of a valid value
        """
        data = {
            "error": "validation_failed",
            "error_type": "validation_error",
            "status_code": 400,
            "suggestion": suggestion,
        }
        if missing_field:
            data["missing_field"] = missing_field
        if example:
            data["example"] = example

        return self._envelope(
            f"{message}\n\n{suggestion}", data, trace_id,
            status="failed", validation="failed"
        )

    def error_response(
        self,
        message: str,
        trace_id: Optional[str] = None,
        error_type: Optional[str] = None,
        **extra_data
    ) -> Dict[str, Any]:
        """Failed envelope; status_code in extra_data selects the HTTP status."""
        data: Dict[str, Any] = {"error": "execution_failed"}
        if error_type:
            data["error_type"] = error_type
        data.update(extra_data)

        return self._envelope(message, data, trace_id, status="failed")

    # ==================== Context ====================

    def get_trace_id(self, context: Dict[str, Any]) -> str:
        return context.get("trace_id") or "unknown"

    def get_entities(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return context.get("entities") or {}

    def get_auth_header(self, context: Dict[str, Any]) -> Optional[str]:
        return context.get("auth_header") or context.get("authorization") or context.get("Authorization")

    def get_user_role(self, context: Dict[str, Any]) -> str:
        return context.get("user_role") or "ANON"

    def get_user_id(self, context: Dict[str, Any]) -> Optional[str]:
        return context.get("user_id")
