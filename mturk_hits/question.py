"""
Question payloads for CreateHIT. A HIT's question may be given as a raw XML
string, or as one of these objects; either way what is sent is the result of
get_as_xml().
"""

from xml.sax.saxutils import escape

from mturk_hits.conf import *


class ExternalQuestion(object):
    """
    A question that is served from your own webserver inside an iframe.
    """
    template = ('<ExternalQuestion xmlns="%(schema)s">'
                '<ExternalURL>%(external_url)s</ExternalURL>'
                '<FrameHeight>%(frame_height)s</FrameHeight>'
                '</ExternalQuestion>')

    def __init__(self, external_url, frame_height=DEFAULT_FRAME_HEIGHT):
        """
        :param external_url: The (https) URL of the task page.
        :param frame_height: The height of the frame, in pixels.
        """
        self.external_url = external_url
        self.frame_height = frame_height

    def get_as_xml(self):
        return self.template % dict(schema=EXTERNAL_QUESTION_SCHEMA,
                                    external_url=escape(self.external_url),
                                    frame_height=self.frame_height)


class HTMLQuestion(object):
    """
    A question whose HTML is sent along with the HIT.
    """
    template = ('<HTMLQuestion xmlns="%(schema)s">'
                '<HTMLContent><![CDATA[%(html_form)s]]></HTMLContent>'
                '<FrameHeight>%(frame_height)s</FrameHeight>'
                '</HTMLQuestion>')

    def __init__(self, html_form, frame_height=DEFAULT_FRAME_HEIGHT):
        self.html_form = html_form
        self.frame_height = frame_height

    def get_as_xml(self):
        return self.template % dict(schema=HTML_QUESTION_SCHEMA,
                                    html_form=self.html_form,
                                    frame_height=self.frame_height)


def question_as_xml(question):
    """
    :param question: A string, or an object with a get_as_xml() method.
    :return: The question as a string, or None if there is none.
    """
    if question is None or isinstance(question, str):
        return question
    return question.get_as_xml()
