from typing import Dict, List, Any, Iterable, Optional, Sequence, Tuple
from collections import Counter
from dataclasses import dataclass
import logging
import os
import threading

import joblib
import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.linear_model import LogisticRegression

from support_assistant.domain.models.intent import (
    NONE_INTENT,
    ClassificationMethod,
    ClassificationResult,
    Intent,
    TrainingExample,
)
from support_assistant.infrastructure.ai.intent.greetings import (
    GREETING_ANSWER,
    GREETING_INTENT,
    GREETING_OVERRIDE_THRESHOLD,
    GREETING_SCORE,
    is_greeting,
)
from support_assistant.utils.exceptions import NotReadyError, TrainingFailureError
from support_assistant.utils.text import fold_text, normalize_utterance


@dataclass(frozen=True)
class _ModelSnapshot:
    """Everything ``classify`` reads, built once per training pass and never mutated."""
    generation: int
    vectorizer: Optional[TfidfVectorizer]
    model: Optional[LogisticRegression]
    labels: Tuple[str, ...]
    example_matrix: Any
    example_labels: np.ndarray
    exact_votes: Dict[str, Counter]
    answers: Dict[str, str]
    num_examples: int


class IntentClassifier:
    """
    Classifies support utterances into catalog intents.

    Training data is a multiset of (utterance, intent id) pairs made of the
    catalog's seed examples plus corrections learned at runtime. Each training
    pass builds an immutable snapshot; ``classify`` always reads the latest
    complete snapshot, so it never observes a half-trained model.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the intent classifier with configuration.

        Args:
            config: Dictionary containing classifier configuration
        """
        self.logger = logging.getLogger(__name__)
        self.config = config or {}
        self.regularization = float(self.config.get("regularization", 10.0))
        self.ngram_range = tuple(self.config.get("ngram_range", (2, 4)))
        self.max_iter = int(self.config.get("max_iter", 1000))

        self._lock = threading.RLock()
        self._seed_examples: List[TrainingExample] = []
        self._learned_examples: List[TrainingExample] = []
        self._answers: Dict[str, str] = {}
        self._generation = 0
        self._model: Optional[_ModelSnapshot] = None

        self.logger.info(f"Initialized Intent Classifier with ngram range {self.ngram_range}")

    @property
    def is_ready(self) -> bool:
        return self._model is not None

    @property
    def generation(self) -> int:
        return self._model.generation if self._model else 0

    @property
    def labels(self) -> Tuple[str, ...]:
        return self._model.labels if self._model else ()

    @property
    def training_examples(self) -> Tuple[TrainingExample, ...]:
        with self._lock:
            return tuple(self._seed_examples + self._learned_examples)

    def bootstrap(self, intents: Sequence[Intent]) -> Dict[str, Any]:
        """
        Load a catalog snapshot and train on it.

        Seed examples and canned answers are replaced by the catalog's;
        corrections learned earlier in the process are kept. Nothing is
        replaced when training fails.

        Args:
            intents: Intent catalog snapshot

        Returns:
            Dictionary containing training results

        Raises:
            TrainingFailureError: If the model could not be fitted
        """
        answers = {intent.id: intent.response for intent in intents}
        seeds = [
            TrainingExample(normalize_utterance(example), intent.id)
            for intent in intents
            for example in intent.examples
            if example.strip()
        ]
        with self._lock:
            return self._train_on(seeds, list(self._learned_examples), answers)

    def add_training_example(self, utterance: str, intent_id: str) -> None:
        """
        Append one example to the training set. Takes effect on the next ``train``.

        Args:
            utterance: Example utterance
            intent_id: Label for the utterance
        """
        normalized = normalize_utterance(utterance)
        if not normalized:
            self.logger.warning(f"Ignoring empty training example for intent {intent_id}")
            return
        with self._lock:
            self._learned_examples.append(TrainingExample(normalized, intent_id))

    def train(self, examples: Optional[Iterable[TrainingExample]] = None) -> Dict[str, Any]:
        """
        Rebuild the model from the full training set.

        Args:
            examples: Optional replacement training set; when omitted the
                accumulated seed and learned examples are used

        Returns:
            Dictionary containing training results

        Raises:
            TrainingFailureError: If the model could not be fitted. The
                previously trained model and training set stay active.
        """
        with self._lock:
            if examples is None:
                return self._train_on(
                    list(self._seed_examples), list(self._learned_examples), dict(self._answers)
                )
            seeds = [
                TrainingExample(normalize_utterance(e.utterance), e.intent_id)
                for e in examples
                if e.utterance.strip()
            ]
            return self._train_on(seeds, [], dict(self._answers))

    def _train_on(
        self,
        seeds: List[TrainingExample],
        learned: List[TrainingExample],
        answers: Dict[str, str]
    ) -> Dict[str, Any]:
        """Fit on a candidate training set and adopt it only if fitting succeeds"""
        # Sorted so the same multiset always yields the same model
        data = sorted(seeds + learned)
        generation = self._generation + 1

        try:
            snapshot = self._fit(data, dict(answers), generation)
        except Exception as e:
            self.logger.error(f"Error training intent classifier: {str(e)}", exc_info=True)
            raise TrainingFailureError(
                message=f"Intent classifier training failed: {str(e)}",
                details={"num_samples": len(data)}
            ) from e

        self._seed_examples = seeds
        self._learned_examples = learned
        self._answers = answers
        self._generation = generation
        self._model = snapshot

        self.logger.info(
            f"Trained intent classifier generation {generation} on "
            f"{snapshot.num_examples} examples across {len(snapshot.labels)} intents"
        )
        return {
            "success": True,
            "generation": generation,
            "num_samples": snapshot.num_examples,
            "num_classes": len(snapshot.labels)
        }

    def _fit(self, data: List[TrainingExample], answers: Dict[str, str], generation: int) -> _ModelSnapshot:
        """Fit vectorizer and estimator for one training pass"""
        if not data:
            return _ModelSnapshot(
                generation=generation,
                vectorizer=None,
                model=None,
                labels=(),
                example_matrix=None,
                example_labels=np.array([], dtype=object),
                exact_votes={},
                answers=answers,
                num_examples=0
            )

        texts = [example.utterance for example in data]
        targets = [example.intent_id for example in data]

        exact_votes: Dict[str, Counter] = {}
        for example in data:
            exact_votes.setdefault(fold_text(example.utterance), Counter())[example.intent_id] += 1

        # Character n-grams keep the model tolerant of typos and inflections
        vectorizer = TfidfVectorizer(
            analyzer="char_wb",
            ngram_range=self.ngram_range,
            strip_accents="unicode",
            lowercase=True,
            sublinear_tf=True
        )
        example_matrix = vectorizer.fit_transform(texts)

        unique_labels = sorted(set(targets))
        model = None
        if len(unique_labels) > 1:
            model = LogisticRegression(
                C=self.regularization,
                max_iter=self.max_iter
            )
            model.fit(example_matrix, targets)
            labels = tuple(str(label) for label in model.classes_)
        else:
            labels = tuple(unique_labels)

        return _ModelSnapshot(
            generation=generation,
            vectorizer=vectorizer,
            model=model,
            labels=labels,
            example_matrix=example_matrix,
            example_labels=np.array(targets, dtype=object),
            exact_votes=exact_votes,
            answers=answers,
            num_examples=len(data)
        )

    def classify(self, text: str) -> ClassificationResult:
        """
        Classify the intent of the input text.

        Args:
            text: Input text to classify

        Returns:
            The top intent, its confidence and its canned answer. Internal
            failures degrade to an empty zero-score result.

        Raises:
            NotReadyError: If the classifier has never been trained
        """
        snapshot = self._model
        if snapshot is None:
            raise NotReadyError()

        try:
            normalized = normalize_utterance(text)
            result = self._predict(snapshot, normalized)

            if (not result.answer or result.score < GREETING_OVERRIDE_THRESHOLD) and is_greeting(normalized):
                self.logger.debug(f"Greeting override for text: {normalized[:50]}")
                return ClassificationResult(
                    intent_id=GREETING_INTENT,
                    answer=GREETING_ANSWER,
                    score=GREETING_SCORE,
                    method=ClassificationMethod.GREETING
                )

            self.logger.debug(
                f"Classified '{normalized[:50]}' as {result.intent_id or '<empty>'} "
                f"({result.score:.3f}, {result.method.value})"
            )
            return result

        except Exception as e:
            self.logger.error(f"Error in intent classification: {str(e)}")
            return ClassificationResult.empty()

    def _predict(self, snapshot: _ModelSnapshot, normalized: str) -> ClassificationResult:
        """Run exact matching, then the statistical model"""
        if not normalized or snapshot.num_examples == 0:
            return ClassificationResult(NONE_INTENT, "", 0.0, ClassificationMethod.NONE)

        votes = snapshot.exact_votes.get(fold_text(normalized))
        if votes:
            intent_id, count = sorted(votes.items(), key=lambda item: (-item[1], item[0]))[0]
            return ClassificationResult(
                intent_id=intent_id,
                answer=snapshot.answers.get(intent_id, ""),
                score=count / sum(votes.values()),
                method=ClassificationMethod.EXACT
            )

        vector = snapshot.vectorizer.transform([normalized])
        if vector.nnz == 0:
            return ClassificationResult(NONE_INTENT, "", 0.0, ClassificationMethod.NONE)

        if snapshot.model is not None:
            probabilities = snapshot.model.predict_proba(vector)[0]
            top = int(np.argmax(probabilities))
            intent_id = snapshot.labels[top]
            probability = float(probabilities[top])
        else:
            intent_id = snapshot.labels[0]
            probability = 1.0

        # Weight by how close the text is to anything seen for that intent, so
        # that a forced choice among few labels does not look confident
        similarities = (snapshot.example_matrix @ vector.T).toarray().ravel()
        same_label = snapshot.example_labels == intent_id
        support = float(similarities[same_label].max()) if same_label.any() else 0.0

        score = float(min(1.0, max(0.0, probability * support)))
        return ClassificationResult(
            intent_id=intent_id,
            answer=snapshot.answers.get(intent_id, ""),
            score=score,
            method=ClassificationMethod.MODEL
        )

    def export(self, path: str) -> str:
        """
        Dump the active model and its training set for offline inspection.

        Args:
            path: Destination file

        Returns:
            The path written

        Raises:
            NotReadyError: If the classifier has never been trained
        """
        snapshot = self._model
        if snapshot is None:
            raise NotReadyError()

        model_data = {
            "generation": snapshot.generation,
            "vectorizer": snapshot.vectorizer,
            "model": snapshot.model,
            "labels": list(snapshot.labels),
            "answers": dict(snapshot.answers),
            "examples": [(e.utterance, e.intent_id) for e in self.training_examples]
        }
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        joblib.dump(model_data, path)
        self.logger.info(f"Exported intent classifier generation {snapshot.generation} to {path}")
        return path
