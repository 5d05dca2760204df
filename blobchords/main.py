import logging
from functools import lru_cache
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from blobchords import config
from blobchords.graph import ChordGraph
from blobchords.music import chord_to_midi, chord_to_pitches, classify, degree_to_chord_name
from blobchords.progression import options_after_sequence
from blobchords.session import option_radius
from blobchords.share import decode_sequence
from blobchords.simulate import samples_for_playback

config.configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_graph() -> ChordGraph:
    return ChordGraph.load(config.graph_path())


class GraphNode(BaseModel):
    id: str


class GraphLink(BaseModel):
    source: str
    target: str
    weight: float


class GraphResponse(BaseModel):
    name: str
    description: str
    nodes: List[GraphNode]
    links: List[GraphLink]


class ChordInfo(BaseModel):
    symbol: str
    chordName: str
    function: Optional[Literal["T", "SD", "D"]] = None
    pitches: List[str]
    midi: List[int]


class OptionsRequest(BaseModel):
    chords: List[str]
    maxChords: Optional[int] = Field(default=None, ge=1)


class Option(BaseModel):
    chord: str
    weight: float
    radius: float
    function: Optional[Literal["T", "SD", "D"]] = None


class OptionsResponse(BaseModel):
    current: str
    complete: bool
    options: List[Option]


class PlaybackRequest(BaseModel):
    chords: List[str] = []
    # The comma-joined value of a share link's ``chords`` parameter.
    share: Optional[str] = None
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    durationSec: float = Field(default=15.0, gt=0, le=120)
    fps: float = Field(default=60.0, gt=0, le=240)
    seed: Optional[int] = None


class BlobMetadata(BaseModel):
    label: str
    color: str
    radius: float


class FrameSample(BaseModel):
    t: float
    positions: List[List[float]]


class NoteEvent(BaseModel):
    t: float
    type: Literal["note_on", "note_off"]
    pitch: str
    midi: int
    vel: Optional[int] = None


class PlaybackResponse(BaseModel):
    blobMetadata: List[BlobMetadata]
    samples: List[FrameSample]
    events: List[NoteEvent]
    completedAt: Optional[float] = None


def _function_code(chord: str) -> Optional[str]:
    function = classify(chord)
    return function.value if function is not None else None


@app.get("/api/graph", response_model=GraphResponse)
def graph():
    return get_graph().to_dict()


@app.get("/api/chords/{symbol}", response_model=ChordInfo)
def chord_info(symbol: str):
    return {
        "symbol": symbol,
        "chordName": degree_to_chord_name(symbol),
        "function": _function_code(symbol),
        "pitches": chord_to_pitches(symbol),
        "midi": chord_to_midi(symbol),
    }


@app.post("/api/options", response_model=OptionsResponse)
def next_options(req: OptionsRequest):
    """Options the play screen offers after the given sequence."""
    if not req.chords:
        raise HTTPException(status_code=400, detail="chords must not be empty")
    max_chords = req.maxChords or config.max_chord_count()
    result = options_after_sequence(get_graph(), req.chords, max_chords)
    return {
        "current": req.chords[-1],
        "complete": result.complete,
        "options": [
            {
                "chord": option.chord,
                "weight": option.weight,
                "radius": option_radius(option.weight),
                "function": _function_code(option.chord),
            }
            for option in result.options
        ],
    }


@app.post("/api/playback", response_model=PlaybackResponse)
def playback(req: PlaybackRequest):
    chords = [chord for chord in req.chords if chord.strip()] or decode_sequence(req.share)
    if not chords:
        raise HTTPException(status_code=400, detail="chords must not be empty")
    logger.info("Simulating playback of %d chords", len(chords))
    return samples_for_playback(
        chords,
        width=req.width,
        height=req.height,
        duration_sec=req.durationSec,
        fps=req.fps,
        seed=req.seed,
    )
