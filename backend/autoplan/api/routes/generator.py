import logging

from fastapi import APIRouter, Body, Depends

from autoplan.api.deps import get_engine
from autoplan.schemas.generator import GenerationOptions, GenerationResult
from autoplan.services.engine import SchedulingEngine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generator/run", response_model=GenerationResult)
def run_generator(
    options: GenerationOptions | None = Body(default=None),
    engine: SchedulingEngine = Depends(get_engine),
) -> GenerationResult:
    result = engine.run_generation(options)
    logger.info(
        "Generation for %s term: %d created, %d failed",
        engine.store.active_term.value,
        result.stats.created,
        result.stats.failed,
    )
    return result
