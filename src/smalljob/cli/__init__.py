"""
smalljob CLI — run the server and drive a running scheduler.

Usage::

    smalljob serve start --port 8080
    smalljob job set 2026-10-19T14:30 --sleep 20 --random-sleep 5
    smalljob job status
    smalljob job cancel
"""
