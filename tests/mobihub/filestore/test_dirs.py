import unittest as test
from unittest.mock import Mock
import requests

from mobihub.filestore.dirs import DirectoryCreator
from mobihub.filestore.auth import BasicAuthenticator
from mobihub.filestore.exceptions import *

baseurl = "https://cloud.example.com"
davfiles = baseurl + "/remote.php/dav/files/mobihub_svc/"

def mock_response(status):
    resp = Mock()
    resp.status_code = status
    resp.text = ""
    return resp

class TestDirectoryCreator(test.TestCase):

    def setUp(self):
        self.auth = BasicAuthenticator("mobihub_svc", "s3cr3t")
        self.session = Mock(spec=requests.Session)
        self.session.request.return_value = mock_response(201)
        self.dirs = DirectoryCreator(baseurl, self.auth, self.session)

    def test_ensure_directories(self):
        self.dirs.ensure_directories("trafficModels/00/07/model.zip")
        calls = self.session.request.call_args_list
        self.assertEqual(len(calls), 3)
        self.assertEqual([c[0] for c in calls],
                         [("MKCOL", davfiles+"trafficModels"),
                          ("MKCOL", davfiles+"trafficModels/00"),
                          ("MKCOL", davfiles+"trafficModels/00/07")])
        for c in calls:
            self.assertIs(c[1]['auth'], self.auth)

    def test_no_parents(self):
        self.dirs.ensure_directories("model.zip")
        self.session.request.assert_not_called()

        self.dirs.ensure_directories("/model.zip")
        self.session.request.assert_not_called()

    def test_already_exists(self):
        self.session.request.return_value = mock_response(405)
        self.dirs.ensure_directories("a/b/c/model.zip")
        self.assertEqual(self.session.request.call_count, 3)

        # repeating is harmless
        self.dirs.ensure_directories("a/b/c/model.zip")
        self.assertEqual(self.session.request.call_count, 6)

    def test_failure(self):
        self.session.request.side_effect = [mock_response(201), mock_response(403)]
        with self.assertRaises(UnexpectedRemoteResponse) as cm:
            self.dirs.ensure_directories("a/b/c/model.zip")
        self.assertEqual(cm.exception.code, 403)
        self.assertEqual(cm.exception.ep, davfiles+"a/b")
        self.assertEqual(self.session.request.call_count, 2)

    def test_comm_failure(self):
        self.session.request.side_effect = requests.ConnectionError("connection refused")
        with self.assertRaises(FileStoreCommError):
            self.dirs.create_directory("a")

    def test_timeout(self):
        self.dirs = DirectoryCreator(baseurl, self.auth, self.session, timeout=12.5)
        self.dirs.create_directory("a b")
        self.session.request.assert_called_once_with("MKCOL", davfiles+"a%20b", auth=self.auth,
                                                     timeout=12.5)


if __name__ == '__main__':
    test.main()
