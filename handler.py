"""
AWS Lambda entry point — serves the Code Optimizer API through Mangum.

Deploy with handler.handler as the function handler.
"""

from mangum import Mangum

from code_optimizer.main import app

handler = Mangum(app, lifespan="off")
