"""FastAPI endpoints for processing and exporting DXF cut files"""

from datetime import datetime, timezone
from typing import List, Optional

import structlog
import uvicorn
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from ..config import ExportMode, ProcessOptions, app_config
from ..core.models import Layer, Point, Polyline, TextEntity
from ..exceptions import MalformedInputError
from ..main import process_dxf
from ..postprocessors.r12 import export_filename, generate_r12, select_for_export

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

app = FastAPI(
    title=app_config.app_name,
    version=app_config.version,
    description="Heal, classify and re-export DXF cut paths for laser cutting"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class PointModel(BaseModel):
    x: float
    y: float


class PolylineModel(BaseModel):
    id: int
    points: List[PointModel]
    closed: bool = False
    layer: Optional[Layer] = None
    original_layer: str = "0"

    def to_polyline(self) -> Polyline:
        return Polyline(
            id=self.id,
            points=tuple(Point(p.x, p.y) for p in self.points),
            closed=self.closed,
            layer=self.layer,
            original_layer=self.original_layer,
        )


class LabelModel(BaseModel):
    x: float
    y: float
    text: str
    layer: str = Layer.BOARDS.value
    height: float = 1.0


class ExportRequest(BaseModel):
    filename: str = ""
    mode: ExportMode = ExportMode.ALL
    polylines: List[PolylineModel]
    labels: List[LabelModel] = []


@app.get("/")
async def root():
    return {
        "name": app_config.app_name,
        "version": app_config.version,
        "endpoints": {
            "process": "/process",
            "export": "/export",
            "health": "/health"
        }
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.post("/process")
async def process_file(
    file: UploadFile = File(...),
    preserve_frame: bool = True,
    enable_labeling: bool = False
):
    """Process an uploaded DXF and return classified contours and stats"""
    filename = file.filename or ""
    if not any(filename.lower().endswith(ext) for ext in app_config.allowed_extensions):
        raise HTTPException(status_code=400, detail="File must be a DXF file")

    content = await file.read()
    if len(content) > app_config.max_file_size:
        raise HTTPException(status_code=413, detail="File too large")

    options = ProcessOptions(preserve_frame=preserve_frame, enable_labeling=enable_labeling)
    try:
        result = process_dxf(content.decode("utf-8", errors="replace"), options)
    except MalformedInputError as e:
        logger.warning("dxf_rejected", filename=filename, error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("processing_failed", filename=filename, error=str(e))
        raise HTTPException(status_code=500, detail=f"Processing failed: {str(e)}")

    logger.info("dxf_processed", filename=filename, contours=len(result.polylines),
                yards=round(result.stats.material_width_yards, 2))
    return {"filename": filename, **result.to_dict()}


@app.post("/export")
async def export_file(request: ExportRequest):
    """Serialize (possibly edited) contours to DXF R12 for the cutter"""
    polylines = [p.to_polyline() for p in request.polylines]
    labels = [TextEntity(**label.model_dump()) for label in request.labels]
    polylines, labels = select_for_export(polylines, labels, request.mode)

    output_filename = export_filename(request.filename, request.mode)
    logger.info("dxf_exported", filename=output_filename, mode=request.mode.value, contours=len(polylines))
    return PlainTextResponse(
        generate_r12(polylines, labels),
        media_type="application/dxf",
        headers={"Content-Disposition": f"attachment; filename={output_filename}"}
    )


def main():
    logger.info("Starting LaserDXX service")
    uvicorn.run(
        app,
        host=app_config.host,
        port=app_config.port,
        log_level=app_config.log_level.lower()
    )


if __name__ == "__main__":
    main()
