from llmgather.main import entrypoint

entrypoint()
