from judgepool.config import settings

api_description = f"""
Judging coordination service. Independent judges score a shared pool of submissions against the criteria of
their judging group, leave notes for each other, and follow their progress. A submission is completed by exactly
one judge, after which it disappears from everyone else's pool.

### Interacting with the documentation
Judges:
1. Register through `POST {settings.api_v1_str}/judges/groups/{{group_id}}/register` with your name (and the
group password if the group is gated). Registering again with the same name resumes your judging.
2. Click on the Authorize button below and paste the returned session token as `X-Judge-Session`.

Administrators authenticate with the `X-API-Key` header.

A `401` response means your session expired: register again to get a new token.
"""


tags_metadata = [
    {
        "name": "groups",
        "description": "Administrator endpoints to manage judging groups, their criteria and submission pool, follow "
        "the judges, rank the results and export the scores.",
    },
    {
        "name": "judges",
        "description": "Register as a judge, keep your session alive, and see your progress and the group's.",
    },
    {
        "name": "submissions",
        "description": "Browse the submissions you can judge, score them, complete or skip them, and discuss them "
        "with the other judges in notes.",
    },
    {
        "name": "scores",
        "description": "Administrator moderation of individual scores: hide, show or delete them.",
    },
]
