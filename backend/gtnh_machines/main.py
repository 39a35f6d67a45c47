from __future__ import annotations

import logging
import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .choices import ChoiceError
from .config import load_settings
from .data_source import DataSource, create_data_source
from .evaluate import MachineEvaluation, evaluate_machine
from .machine import Machine
from .machines import MACHINES
from .models import RecipeItem, RecipeModel
from .registry import MachineRegistry

logger = logging.getLogger("gtnh_machines.api")


class EvaluateRequestModel(BaseModel):
    machine: str
    rid: str
    voltage_tier: int = 1
    choices: dict[str, float] = {}


def machine_summary(name: str, machine: Machine) -> dict:
    return {
        "name": name,
        "info": machine.info,
        "ignore_parallel_limit": machine.ignore_parallel_limit,
        "choices": {
            key: {
                "description": choice.description,
                "options": list(choice.options) if choice.options is not None else None,
                "min": choice.min,
                "max": choice.max,
            }
            for key, choice in machine.choices.items()
        },
    }


def item_payload(item: RecipeItem) -> dict:
    return {
        "type": item.type.value,
        "goods_id": item.goods.id,
        "name": item.goods.name,
        "slot": item.slot,
        "amount": item.amount,
        "probability": item.probability,
    }


def evaluation_payload(name: str, evaluation: MachineEvaluation) -> dict:
    return {
        "machine": name,
        "voltage_tier": evaluation.voltage_tier,
        "choices": evaluation.choices,
        "speed": evaluation.speed,
        "power": evaluation.power,
        "parallels": evaluation.parallels,
        "overclock": {
            "speed": evaluation.overclock.speed_multiplier,
            "power": evaluation.overclock.power_multiplier,
            "perfect_overclocks": evaluation.overclock.perfect_overclocks,
            "name": evaluation.overclock.name,
        },
        "items": [item_payload(item) for item in evaluation.items],
        "info": evaluation.info,
    }


def create_app(data_source: DataSource, registry: MachineRegistry = MACHINES) -> FastAPI:
    app = FastAPI(title="GTNH Machine Engine API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    @app.get("/api/machines")
    def list_machines():
        return {"machines": [machine_summary(name, machine) for name, machine in registry.items()]}

    @app.get("/api/machines/{name}")
    def get_machine(name: str):
        machine = registry.get(name)
        if machine is None:
            raise HTTPException(status_code=404, detail=f"Unknown machine: {name}")
        return machine_summary(name, machine)

    @app.get("/api/recipes/{rid}/machines")
    def eligible_machines(rid: str):
        repository = data_source.open_repository()
        try:
            recipe = repository.recipe_by_rid(rid)
        finally:
            repository.close()
        if recipe is None:
            raise HTTPException(status_code=404, detail=f"Unknown recipe: {rid}")
        names = [name for name, machine in registry.items() if machine.is_eligible(recipe)]
        return {"rid": rid, "machines": names}

    @app.post("/api/evaluate")
    def evaluate(req: EvaluateRequestModel):
        machine = registry.get(req.machine)
        if machine is None:
            raise HTTPException(status_code=404, detail=f"Unknown machine: {req.machine}")
        repository = data_source.open_repository()
        try:
            recipe = repository.recipe_by_rid(req.rid)
            if recipe is None:
                raise HTTPException(status_code=404, detail=f"Unknown recipe: {req.rid}")
            context = RecipeModel(
                recipe=recipe,
                voltage_tier=req.voltage_tier,
                choices=dict(req.choices),
                repository=repository,
            )
            try:
                evaluation = evaluate_machine(machine, context)
            except ChoiceError as exc:
                raise HTTPException(status_code=400, detail=exc.problems) from exc
        finally:
            repository.close()
        return evaluation_payload(req.machine, evaluation)

    return app


settings = load_settings()
logging.basicConfig(level=settings.log_level)
app = create_app(create_data_source(settings.data_source, settings.local_data_dir))


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("GTNH_API_PORT", "8000"))
    uvicorn.run(app, host="0.0.0.0", port=port)
