"""
Data contract consumed by the render engine (data.json).

The engine reads these keys verbatim, so every model serialises with
camelCase aliases. Optional fields left as None are omitted on write.
"""

from typing import List, Literal, Optional

from pydantic import Field

from .render import CamelModel

SectionName = Literal["hook", "headline", "main", "impact", "outro"]
Transition = Literal["fade", "slide", "zoom", "none"]


class SubtitleWord(CamelModel):
    """One narration token with its frame range."""

    word: str
    start_frame: int
    end_frame: int
    index: int
    is_start_of_sentence: bool
    is_end_of_sentence: bool


class SectionEffects(CamelModel):
    """Visual effect parameters. Opaque to the orchestrator."""

    zoom_factor: Optional[float] = None
    blur_intensity: Optional[float] = None
    parallax_offset: Optional[float] = None
    glow_intensity: Optional[float] = None
    transition_in: Optional[Transition] = None
    transition_out: Optional[Transition] = None


class VideoSection(CamelModel):
    """Named stage of the video covering [start_frame, end_frame)."""

    name: SectionName
    start_frame: int
    end_frame: int
    duration_seconds: float
    content: str
    image: Optional[str] = None
    effects: SectionEffects = Field(default_factory=SectionEffects)


class ContractMeta(CamelModel):
    video_id: str
    title: str
    topic: str
    source: str
    company: Optional[str] = None
    news_type: Optional[str] = None
    duration_in_frames: int
    fps: int
    generated_at: str


class ContractContent(CamelModel):
    hook: str
    headline: str
    body: str
    impact: str
    cta: str
    full_script: str


class ContractAssets(CamelModel):
    audio_path: str
    audio_duration: float
    hero_image: str
    context_image: Optional[str] = None
    outro_image: str
    company_logo: Optional[str] = None


class StyleEffects(CamelModel):
    zoom: bool = True
    blur: bool = True
    parallax: bool = True
    glow: bool = True


class ContractStyle(CamelModel):
    theme: Literal["cyberpunk", "minimal", "corporate"] = "cyberpunk"
    primary_color: str = "#00FFFF"
    accent_color: str = "#FF00FF"
    show_subtitles: bool = True
    show_progress_bar: bool = True
    effects: StyleEffects = Field(default_factory=StyleEffects)


class RenderDataContract(CamelModel):
    """Full payload written to data.json before every engine invocation."""

    meta: ContractMeta
    content: ContractContent
    assets: ContractAssets
    subtitles: List[SubtitleWord]
    sections: List[VideoSection]
    style: ContractStyle = Field(default_factory=ContractStyle)

    def to_json(self) -> str:
        """Serialise exactly as the engine expects it."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


# --- Composition input props (props.json) ---


class PropsNews(CamelModel):
    title: str
    description: str
    details: List[str]
    source: str
    published_at: str


class PropsImages(CamelModel):
    hero: str
    context: str


class PropsVoice(CamelModel):
    src: str
    volume: float = 1.0


class PropsAudio(CamelModel):
    voice: PropsVoice


class PropsConfig(CamelModel):
    duration: int
    fps: int
    enhanced_effects: bool = True


class VideoProps(CamelModel):
    """Input props handed to the composition via --props."""

    news: PropsNews
    images: PropsImages
    topics: List[str]
    hashtags: List[str]
    news_type: str
    audio: PropsAudio
    config: PropsConfig

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)
