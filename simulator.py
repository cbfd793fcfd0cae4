# simulator.py
import os, time, random, requests

BASE_URL = os.environ.get("FOOTY_URL", "http://127.0.0.1:8000")
SESSION_ID = os.environ.get("FOOTY_SESSION", "")  # sessionid cookie of a logged-in user

FIELD_IDS = [1, 2, 3]

# each field drifts around its own crowding level
weights = {
    1: [0.6, 0.3, 0.1],
    2: [0.2, 0.6, 0.2],
    3: [0.1, 0.3, 0.6],
}


def step(session, field_id):
    level = random.choices(["low", "medium", "high"], weights=weights[field_id])[0]
    url = f"{BASE_URL}/traffic/fields/{field_id}/reports/"
    try:
        resp = session.post(url, json={"level": level, "comment": "simulated"}, timeout=5)
        print("POST", field_id, level, resp.status_code, resp.text)
    except requests.RequestException as e:
        print("ERR", e)


if __name__ == "__main__":
    s = requests.Session()
    if SESSION_ID:
        s.cookies.set("sessionid", SESSION_ID)
    while True:
        for fid in FIELD_IDS:
            step(s, fid)
        time.sleep(2)
