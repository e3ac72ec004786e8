"""
Online learning from user disambiguation choices.

A confirmed (utterance, intent) pair is expanded into paraphrases, appended to
the classifier's training set and the classifier is retrained in place.
"""

from typing import Any, Dict, List, Optional
import threading

from support_assistant.infrastructure.ai.intent.intent_classifier import IntentClassifier
from support_assistant.infrastructure.ai.intent.variations import VariationExpander
from support_assistant.utils.exceptions import ValidationException
from support_assistant.utils.logger import get_logger


class OnlineLearningCoordinator:
    """
    Applies single confirmed corrections to the shared classifier.

    ``learn`` calls are serialized: appending the variants and retraining
    form one unit that never interleaves with another correction.
    """

    def __init__(
        self,
        classifier: IntentClassifier,
        expander: Optional[VariationExpander] = None
    ):
        """
        Initialize the coordinator with dependencies.

        Args:
            classifier: Classifier whose training set is extended
            expander: Paraphrase generator for confirmed utterances
        """
        self.classifier = classifier
        self.expander = expander or VariationExpander()
        self._lock = threading.Lock()
        self.logger = get_logger(__name__)

    def learn(self, utterance: str, intent_id: str) -> Dict[str, Any]:
        """
        Teach the classifier that ``utterance`` means ``intent_id``.

        Intent ids outside the current label space are accepted and become a
        new label.

        Args:
            utterance: User utterance confirmed by disambiguation
            intent_id: Intent chosen by the user

        Returns:
            Dictionary containing training results and the variants learned

        Raises:
            ValidationException: If the utterance or intent id is blank
            TrainingFailureError: If retraining fails; the appended variants
                stay in the training set for the next retrain
        """
        if not utterance or not utterance.strip():
            raise ValidationException(
                message="Cannot learn from an empty utterance",
                details={"field": "utterance"}
            )
        if not intent_id or not intent_id.strip():
            raise ValidationException(
                message="Cannot learn without an intent id",
                details={"field": "intent_id"}
            )

        variants: List[str] = self.expander.expand(utterance)

        with self._lock:
            if intent_id not in self.classifier.labels:
                self.logger.warning(f"Learning new intent label not seen in training: {intent_id}")

            for variant in variants:
                self.classifier.add_training_example(variant, intent_id)
            result = self.classifier.train()

        self.logger.info(
            f"Model updated: learned '{utterance}' for intent '{intent_id}'",
            extra={"intent_id": intent_id, "variants": len(variants), "generation": result["generation"]}
        )
        return {**result, "variants": variants}
