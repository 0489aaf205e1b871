"""Services layer for the upload relay.

Services implement business logic on top of infrastructure clients:
- uploader: TikTok upload orchestration and chunk planning
"""
