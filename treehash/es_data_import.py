#!/usr/bin/env python
"""Index tree hash records into ElasticSearch."""

import json, requests, logging, argparse, os

from treehash.errors import IndexingError

# ElasticSearch parameters
ES_HOST = os.getenv('ES_HOST', '127.0.0.1')
ES_PORT = os.getenv('ES_PORT', '9200')

_logger = logging.getLogger(__name__)


def post(index, typez, data, host=ES_HOST, port=ES_PORT, session=None):
    if session is None:
        with requests.Session() as s:
            return post(index, typez, data, host, port, session=s)

    s = session
    url = "http://%s:%s/%s/%s" % (host, port, index, typez)

    try:
        r = s.post(url, data=json.dumps(data),
                   headers={'Content-Type': 'application/json'})
        r.raise_for_status()
    except requests.RequestException as e:
        raise IndexingError('Failed to index document at %s: %s' % (url, e)) from e

    _logger.debug(r.text)
    return r


def main():
    _parser = argparse.ArgumentParser()
    _parser.add_argument('--data', action='store', dest='data', type=str, help='Data to send to elasticsearch')
    _parser.add_argument('--extra', action='store', dest='extra', type=str, help='Extra data to merge with the main data')
    _parser.add_argument('--index', action='store', dest='index', type=str, help='Index')
    _parser.add_argument('--type', action='store', dest='typez', type=str, default='archive', help='Type')
    _parser.add_argument('-d', '--debug', action='store_true', dest='debug', help='More logging on console')
    _args = _parser.parse_args()

    logging.basicConfig(format='%(asctime)s - %(levelname)s: %(message)s',
                        level=logging.DEBUG if _args.debug else logging.INFO)

    if not _args.data:
        _logger.error('Data missing, nothing to index!')
        return 1
    if not _args.index:
        _logger.error('Index missing, nowhere to index!')
        return 1

    data = json.loads(_args.data)
    data.update(json.loads(_args.extra or "{}"))
    try:
        post(_args.index, _args.typez, data)
    except IndexingError as e:
        _logger.error(e)
        return 1
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
