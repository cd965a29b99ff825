import logging
from typing import Any, Dict, List, Optional

from src.core.exceptions import MetadataGenerationError
from src.schemas.models.common.video_metadata import VideoMetadata
from src.schemas.models.prompt.generated_metadata import GeneratedMetadata

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a YouTube SEO expert. Generate metadata in JSON format with these fields: "
    "title (engaging version of input title), description (compelling 2-3 paragraphs), "
    "tags (15-20 relevant keywords as array)."
)


class MetadataService:
    """
    OpenAI 로 업로드용 메타데이터를 생성한다.
    클라이언트가 없거나 호출이 실패하면 결정적인 기본값으로 대체한다 (요청을 실패시키지 않음).
    """

    def __init__(self, client: Optional[Any], model_name: str):
        self._client = client  # openai.OpenAI
        self._model_name = model_name

    def generate(self, title: str) -> VideoMetadata:
        if self._client is None:
            return VideoMetadata.fallback(title)

        try:
            return self._generate_with_llm(title)
        except Exception as e:
            logger.warning(f"Metadata generation failed, using fallback: {e}")
            return VideoMetadata.fallback(title)

    def _generate_with_llm(self, title: str) -> VideoMetadata:
        response = self._client.responses.parse(
            model=self._model_name,
            input=self._build_messages(title),
            text_format=GeneratedMetadata,
        )
        parsed = getattr(response, "output_parsed", None)
        if parsed is None:
            raise MetadataGenerationError("Text generation returned no parsed output")

        logger.debug(f"Generated metadata with {len(parsed.tags)} tags (model: {self._model_name})")
        return VideoMetadata(
            title=parsed.title or title,
            description=parsed.description or "",
            tags=[tag for tag in parsed.tags if tag],
        )

    def _build_messages(self, title: str) -> List[Dict[str, str]]:
        return [
            # Responses API는 developer role 사용
            {"role": "developer", "content": SYSTEM_INSTRUCTION},
            {
                "role": "user",
                "content": f'Generate optimized YouTube metadata for this video title: "{title}". Return only valid JSON.',
            },
        ]
