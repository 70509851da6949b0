from bundlegate.api.main import app

if __name__ == "__main__":
    import os
    import uvicorn
    host = os.getenv("BUNDLEGATE_HOST", "0.0.0.0")
    port = int(os.getenv("BUNDLEGATE_PORT", "8001"))
    uvicorn.run(app, host=host, port=port)
