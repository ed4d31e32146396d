from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from azure.cognitiveservices.vision.customvision.prediction import CustomVisionPredictionClient
from msrest.authentication import ApiKeyCredentials
from msrest.exceptions import ClientException

from magicbox_config import PredictionCredentials


class PredictionError(RuntimeError):
    """Raised when the prediction endpoint cannot be reached or rejects the call."""


@dataclass(frozen=True, slots=True)
class BoundingBox:
    left: float
    top: float
    width: float
    height: float

    def to_dict(self) -> dict[str, float]:
        return {"top": self.top, "left": self.left, "width": self.width, "height": self.height}


@dataclass(frozen=True, slots=True)
class Prediction:
    tag_name: str
    probability: float | None
    bounding_box: BoundingBox | None = None

    @property
    def score(self) -> float:
        return -1.0 if self.probability is None else float(self.probability)


def top_prediction(predictions: Sequence[Prediction]) -> Prediction | None:
    # sorted() is stable, ties keep the service order
    if not predictions:
        return None
    return sorted(predictions, key=lambda p: p.score, reverse=True)[0]


def _to_prediction(model: Any) -> Prediction:
    box = getattr(model, "bounding_box", None)
    return Prediction(
        tag_name=str(getattr(model, "tag_name", "") or ""),
        probability=None if getattr(model, "probability", None) is None else float(model.probability),
        bounding_box=None
        if box is None
        else BoundingBox(
            left=float(box.left),
            top=float(box.top),
            width=float(box.width),
            height=float(box.height),
        ),
    )


class PredictionClient:
    def __init__(self, credentials: PredictionCredentials, client: Any | None = None) -> None:
        self.credentials = credentials
        if client is None:
            api_key = ApiKeyCredentials(in_headers={"Prediction-key": credentials.prediction_key})
            client = CustomVisionPredictionClient(credentials.endpoint, api_key)
        self._client = client

    def _call(self, op: str, image_path: Path) -> list[Prediction]:
        try:
            image_data = Path(image_path).read_bytes()
            fn = getattr(self._client, op)
            result = fn(self.credentials.project_id, self.credentials.iteration_name, image_data)
        except (ClientException, OSError) as exc:
            raise PredictionError(f"{op} failed for {image_path}: {exc}") from exc
        return [_to_prediction(m) for m in (getattr(result, "predictions", None) or [])]

    def classify(self, image_path: Path) -> list[Prediction]:
        return self._call("classify_image", image_path)

    def detect(self, image_path: Path) -> list[Prediction]:
        return self._call("detect_image", image_path)
