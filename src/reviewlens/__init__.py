"""ReviewLens - structured sentiment analysis of product reviews using an LLM.

A single-page web form sends review text to an external generative model
together with a fixed system instruction and response schema, then renders
the structured result (sentiment, confidence, themes, tone, sarcasm, summary).

Components:
- main_web: FastAPI app serving the page and JSON endpoints
- controller: analysis state machine (idle/loading/success/error)
- llm: prompt data, model clients, result schema
- rendering: HTML page rendering
"""
