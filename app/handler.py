"""Serverless entrypoint (AWS Lambda / API Gateway) for the plant care API."""

from mangum import Mangum

from app.main import app

handler = Mangum(app, lifespan="off")
