#!/usr/bin/env python3
"""Simple script to run the ICS-205 to CHIRP API"""
import logging
import os

import uvicorn

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("ics205_chirp.api:app", host="0.0.0.0",
                port=int(os.getenv("PORT", "8080")), reload=True)
