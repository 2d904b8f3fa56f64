from contextlib import asynccontextmanager
from fastapi import FastAPI
from settlewise.db.database import Base, engine
from settlewise.api.v1.routes.scenarios import router as scenarios_router
from settlewise.api.v1.routes.settlements import router as settlements_router
from settlewise.services.scenario_cleanup import start_scenario_cleanup, stop_scenario_cleanup

Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Remove stale scenarios in the background
    start_scenario_cleanup()
    yield
    stop_scenario_cleanup()


app = FastAPI(
    title="SettleWise - Expense Settlement",
    description="Computes net balances and reduced settlements for group debts",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(scenarios_router)
app.include_router(settlements_router)

@app.get("/")
def read_root():
    return {"message": "SettleWise API", "version": "1.0.0"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}
