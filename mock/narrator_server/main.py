from fastapi import FastAPI, HTTPException, Request
import json
import os

app = FastAPI(title="Mock Narrator Server", version="1.0.0")
# Set MOCK_NARRATOR_MODE=invent to return a narrative with a made-up number
MODE = os.getenv("MOCK_NARRATOR_MODE", "echo")

@app.get("/health")
def health(): return {"status": "ok"}

@app.post("/v1/chat/completions")
async def chat_completions(request: Request):
    body = await request.json()
    prompt = body["messages"][-1]["content"]
    try:
        payload = json.loads(prompt.split("JSON:\n", 1)[1])
    except (IndexError, ValueError):
        raise HTTPException(status_code=400, detail="prompt has no JSON payload")

    verdict = "Buying" if payload["verdict"] == "buy" else "Leasing"
    narrative = {
        "headline": f"{verdict} looks like the steadier choice",
        "explanation": f"Buying totals about ${round(payload['buy_total_cost'])} and leasing about ${round(payload['lease_total_cost'])}.",
        "bullets": [
            f"Buy stress score {round(payload['buy_stress_score'])}.",
            f"Lease stress score {round(payload['lease_stress_score'])}.",
            "Confidence is " + payload["confidence"] + ".",
        ],
        "cautions": ["These are estimates."],
    }
    if MODE == "invent":
        narrative["bullets"].append("Dealers often knock $99/month off.")

    return {
        "id": "mock-completion",
        "object": "chat.completion",
        "model": body.get("model", "mock"),
        "choices": [{"index": 0, "message": {"role": "assistant", "content": json.dumps(narrative)}, "finish_reason": "stop"}],
    }
