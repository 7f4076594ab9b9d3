from fastapi import FastAPI
from musclelab.routes.analyze_route import router as analyze_router
from musclelab.routes.health_route import router as health_router

app = FastAPI(
    title="MuscleLab",
    version="1.0.0"
)

# Register endpoints
app.include_router(health_router, tags=["health"])
app.include_router(analyze_router, tags=["analysis"])
