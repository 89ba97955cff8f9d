"""Run the API: python -m chefbook"""
import uvicorn

if __name__ == "__main__":
    uvicorn.run("chefbook.main:app", host="0.0.0.0", port=8000)
