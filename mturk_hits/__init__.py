"""
A client for creating and managing HITs on Amazon Mechanical Turk.

    from mturk_hits import Requester, hit

    def created(errors, new_hit):
        if errors:
            ...
        print(new_hit.id)

    hit.create(Requester(), hit_type_id, question, 3600, callback=created)
"""

from mturk_hits import assignment, hit
from mturk_hits.assignment import Assignment, AssignmentOptions
from mturk_hits.errors import (MissingNodeError, MTurkError, RequestError,
                               ValidationError)
from mturk_hits.hit import (HIT, CreateOptions, ExtendOptions,
                            ReviewableOptions, SearchOptions)
from mturk_hits.question import ExternalQuestion, HTMLQuestion
from mturk_hits.requester import Requester

__version__ = '0.1.0'
