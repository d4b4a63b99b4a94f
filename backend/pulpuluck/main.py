from fastapi import FastAPI
from pulpuluck.routes.feedback_route import router as feedback_router

app = FastAPI(title="Pulpuluck Feedback API")
app.include_router(feedback_router)

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {
        "message": "Welcome to the Pulpuluck fountain feedback API",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "feedback": "/feedback",
            "vote": "/feedback/{fountain_id}/vote",
            "docs": "/docs"
        },
        "version": "1.0.0"
    }

# --- Health Check ---
@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "Pulpuluck Feedback API"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("pulpuluck.main:app", host="0.0.0.0", port=8000, reload=True)
