#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate - entry point
Runs the dashboard API with uvicorn
"""

from checkmate.dashboard.app import main

if __name__ == "__main__":
    main()
