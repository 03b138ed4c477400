from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / ".env")

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from shapely.geometry import Polygon

from config import PocketConfig, load_config
from nodes.boundary import chain_from_polygon
from nodes.motion import MotionRecorder
from nodes.pocket import build_pocket, make_pocket, subtract_pocket
from schemas import PocketRequest, PocketResult

app = FastAPI(title="PathDesigner Pocket", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:5174"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_config: PocketConfig | None = None


def _get_config() -> PocketConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


@app.get("/health")
def health():
    return {"status": "ok", "version": "0.1.0"}


@app.post("/api/pocket", response_model=PocketResult)
def generate_pocket_endpoint(req: PocketRequest):
    """Build a scanline pocket, subtract exclusions, and return its motion."""
    config = _get_config()
    resolution = req.resolution if req.resolution is not None else config.resolution

    # Tool centre stays one radius inside the outline. Exclusions also grow
    # by the margin their own intervals lose, so the split ends clear them.
    radius = req.tool.diameter / 2
    exclusion_offset = radius + config.margin_ratio * req.tool.diameter

    try:
        outline = Polygon(req.outline, holes=req.holes or None)
        pocket = build_pocket(
            chain_from_polygon(outline, offset=-radius), req.tool, req.material, resolution,
            config=config,
        )
        for coords in req.exclusions:
            island = build_pocket(
                chain_from_polygon(Polygon(coords), offset=exclusion_offset), req.tool,
                req.material, resolution, config=config,
            )
            subtract_pocket(pocket, island, config=config)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Pocket generation failed: {e}")

    recorder = MotionRecorder(traverse_z=config.traverse_z)
    make_pocket(pocket, req.cut_depth, req.rapid_depth, req.tool, recorder, config=config)

    return PocketResult(
        rows=pocket.rows,
        segment_count=pocket.segment_count,
        commands=recorder.commands,
    )
