# -*- coding: utf-8 -*-
# Generated by the protocol buffer compiler.  DO NOT EDIT!
# source: mapd.proto
"""Generated protocol buffer code."""
from google.protobuf.internal import builder as _builder
from google.protobuf import descriptor as _descriptor
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import symbol_database as _symbol_database
# @@protoc_insertion_point(imports)

_sym_db = _symbol_database.Default()




DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(b'\n\nmapd.proto\x12\x04mapd\"O\n\tTTypeInfo\x12\x0c\n\x04type\x18\x01 \x01(\x05\x12\x10\n\x08\x65ncoding\x18\x02 \x01(\x05\x12\x10\n\x08nullable\x18\x03 \x01(\x08\x12\x10\n\x08is_array\x18\x04 \x01(\x08\"B\n\x0bTColumnType\x12\x10\n\x08\x63ol_name\x18\x01 \x01(\t\x12!\n\x08\x63ol_type\x18\x02 \x01(\x0b\x32\x0f.mapd.TTypeInfo\"a\n\x0bTColumnData\x12\x0f\n\x07int_col\x18\x01 \x03(\x12\x12\x10\n\x08real_col\x18\x02 \x03(\x01\x12\x0f\n\x07str_col\x18\x03 \x03(\t\x12\x1e\n\x07\x61rr_col\x18\x04 \x03(\x0b\x32\r.mapd.TColumn\"9\n\x07TColumn\x12\x1f\n\x04\x64\x61ta\x18\x01 \x01(\x0b\x32\x11.mapd.TColumnData\x12\r\n\x05nulls\x18\x02 \x03(\x08\"^\n\tTDatumVal\x12\x0f\n\x07int_val\x18\x01 \x01(\x12\x12\x10\n\x08real_val\x18\x02 \x01(\x01\x12\x0f\n\x07str_val\x18\x03 \x01(\t\x12\x1d\n\x07\x61rr_val\x18\x04 \x03(\x0b\x32\x0c.mapd.TDatum\"7\n\x06TDatum\x12\x1c\n\x03val\x18\x01 \x01(\x0b\x32\x0f.mapd.TDatumVal\x12\x0f\n\x07is_null\x18\x02 \x01(\x08\"\"\n\x04TRow\x12\x1a\n\x04\x63ols\x18\x01 \x03(\x0b\x32\x0c.mapd.TDatum\"}\n\x07TRowSet\x12#\n\x08row_desc\x18\x01 \x03(\x0b\x32\x11.mapd.TColumnType\x12\x18\n\x04rows\x18\x02 \x03(\x0b\x32\n.mapd.TRow\x12\x1e\n\x07\x63olumns\x18\x03 \x03(\x0b\x32\r.mapd.TColumn\x12\x13\n\x0bis_columnar\x18\x04 \x01(\x08\"?\n\x0fTConnectRequest\x12\x0c\n\x04user\x18\x01 \x01(\t\x12\x0e\n\x06passwd\x18\x02 \x01(\t\x12\x0e\n\x06\x64\x62name\x18\x03 \x01(\t\"#\n\x10TSessionResponse\x12\x0f\n\x07session\x18\x01 \x01(\t\"\"\n\x0fTSessionRequest\x12\x0f\n\x07session\x18\x01 \x01(\t\"\x08\n\x06TEmpty\"N\n\rTServerStatus\x12\x11\n\tread_only\x18\x01 \x01(\x08\x12\x19\n\x11rendering_enabled\x18\x02 \x01(\x08\x12\x0f\n\x07version\x18\x03 \x01(\t\"f\n\rTQueryRequest\x12\x0f\n\x07session\x18\x01 \x01(\t\x12\r\n\x05query\x18\x02 \x01(\t\x12\x15\n\rcolumn_format\x18\x03 \x01(\x08\x12\r\n\x05nonce\x18\x04 \x01(\t\x12\x0f\n\x07\x66irst_n\x18\x05 \x01(\x12\"o\n\x0cTQueryResult\x12\x1e\n\x07row_set\x18\x01 \x01(\x0b\x32\r.mapd.TRowSet\x12\x19\n\x11\x65xecution_time_ms\x18\x02 \x01(\x03\x12\x15\n\rtotal_time_ms\x18\x03 \x01(\x03\x12\r\n\x05nonce\x18\x04 \x01(\t\"e\n\x0eTRenderRequest\x12\x0f\n\x07session\x18\x01 \x01(\t\x12\r\n\x05query\x18\x02 \x01(\t\x12\x13\n\x0brender_type\x18\x03 \x01(\t\x12\r\n\x05nonce\x18\x04 \x01(\t\x12\x0f\n\x07\x66irst_n\x18\x05 \x01(\x12\"w\n\rTRenderResult\x12\r\n\x05image\x18\x01 \x01(\x0c\x12\r\n\x05nonce\x18\x02 \x01(\t\x12\x19\n\x11\x65xecution_time_ms\x18\x03 \x01(\x03\x12\x16\n\x0erender_time_ms\x18\x04 \x01(\x03\x12\x15\n\rtotal_time_ms\x18\x05 \x01(\x03\"2\n\x10TValidateRequest\x12\x0f\n\x07session\x18\x01 \x01(\t\x12\r\n\x05query\x18\x02 \x01(\t\"6\n\x10TTableDescriptor\x12\"\n\x07\x63olumns\x18\x01 \x03(\x0b\x32\x11.mapd.TColumnType\"!\n\x0fTTablesResponse\x12\x0e\n\x06tables\x18\x01 \x03(\t\"4\n\rTTableRequest\x12\x0f\n\x07session\x18\x01 \x01(\t\x12\x12\n\ntable_name\x18\x02 \x01(\t\",\n\x07TDBInfo\x12\x0f\n\x07\x64\x62_name\x18\x01 \x01(\t\x12\x10\n\x08\x64\x62_owner\x18\x02 \x01(\t\"6\n\x12TDatabasesResponse\x12 \n\tdatabases\x18\x01 \x03(\x0b\x32\r.mapd.TDBInfo\"\x1e\n\x06TPixel\x12\t\n\x01x\x18\x01 \x01(\x03\x12\t\n\x01y\x18\x02 \x01(\x03\"\x1d\n\x0cTColumnNames\x12\r\n\x05names\x18\x01 \x03(\t\"\x97\x02\n\rTPixelRequest\x12\x0f\n\x07session\x18\x01 \x01(\t\x12\x11\n\twidget_id\x18\x02 \x01(\x03\x12\x1b\n\x05pixel\x18\x03 \x01(\x0b\x32\x0c.mapd.TPixel\x12?\n\x0ftable_col_names\x18\x04 \x03(\x0b\x32&.mapd.TPixelRequest.TableColNamesEntry\x12\x15\n\rcolumn_format\x18\x05 \x01(\x08\x12\x14\n\x0cpixel_radius\x18\x06 \x01(\x05\x12\r\n\x05nonce\x18\x07 \x01(\t\x1aH\n\x12TableColNamesEntry\x12\x0b\n\x03key\x18\x01 \x01(\t\x12!\n\x05value\x18\x02 \x01(\x0b\x32\x12.mapd.TColumnNames:\x02\x38\x01\"\x8e\x01\n\x14TPixelTableRowResult\x12\x1b\n\x05pixel\x18\x01 \x01(\x0b\x32\x0c.mapd.TPixel\x12\x17\n\x0fvega_table_name\x18\x02 \x01(\t\x12\x10\n\x08table_id\x18\x03 \x03(\x03\x12\x0e\n\x06row_id\x18\x04 \x03(\x03\x12\x1e\n\x07row_set\x18\x05 \x01(\x0b\x32\r.mapd.TRowSet\"h\n\x0cTPixelResult\x12.\n\npixel_rows\x18\x01 \x03(\x0b\x32\x1a.mapd.TPixelTableRowResult\x12\x19\n\x11\x65xecution_time_ms\x18\x02 \x01(\x03\x12\r\n\x05nonce\x18\x03 \x01(\t2\xdd\x04\n\x04MapD\x12\x38\n\x07\x43onnect\x12\x15.mapd.TConnectRequest\x1a\x16.mapd.TSessionResponse\x12\x31\n\nDisconnect\x12\x15.mapd.TSessionRequest\x1a\x0c.mapd.TEmpty\x12=\n\x0fGetServerStatus\x12\x15.mapd.TSessionRequest\x1a\x13.mapd.TServerStatus\x12\x35\n\nSqlExecute\x12\x13.mapd.TQueryRequest\x1a\x12.mapd.TQueryResult\x12\x33\n\x06Render\x12\x14.mapd.TRenderRequest\x1a\x13.mapd.TRenderResult\x12=\n\x0bSqlValidate\x12\x16.mapd.TValidateRequest\x1a\x16.mapd.TTableDescriptor\x12\x39\n\tGetTables\x12\x15.mapd.TSessionRequest\x1a\x15.mapd.TTablesResponse\x12\x41\n\x12GetTableDescriptor\x12\x13.mapd.TTableRequest\x1a\x16.mapd.TTableDescriptor\x12?\n\x0cGetDatabases\x12\x15.mapd.TSessionRequest\x1a\x18.mapd.TDatabasesResponse\x12?\n\x14GetResultRowForPixel\x12\x13.mapd.TPixelRequest\x1a\x12.mapd.TPixelResultb\x06proto3')

_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, globals())
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, 'mapd_pb2', globals())
if _descriptor._USE_C_DESCRIPTORS == False:

  DESCRIPTOR._options = None
  _TPIXELREQUEST_TABLECOLNAMESENTRY._options = None
  _TPIXELREQUEST_TABLECOLNAMESENTRY._serialized_options = b'8\001'
  _TTYPEINFO._serialized_start=20
  _TTYPEINFO._serialized_end=99
  _TCOLUMNTYPE._serialized_start=101
  _TCOLUMNTYPE._serialized_end=167
  _TCOLUMNDATA._serialized_start=169
  _TCOLUMNDATA._serialized_end=266
  _TCOLUMN._serialized_start=268
  _TCOLUMN._serialized_end=325
  _TDATUMVAL._serialized_start=327
  _TDATUMVAL._serialized_end=421
  _TDATUM._serialized_start=423
  _TDATUM._serialized_end=478
  _TROW._serialized_start=480
  _TROW._serialized_end=514
  _TROWSET._serialized_start=516
  _TROWSET._serialized_end=641
  _TCONNECTREQUEST._serialized_start=643
  _TCONNECTREQUEST._serialized_end=706
  _TSESSIONRESPONSE._serialized_start=708
  _TSESSIONRESPONSE._serialized_end=743
  _TSESSIONREQUEST._serialized_start=745
  _TSESSIONREQUEST._serialized_end=779
  _TEMPTY._serialized_start=781
  _TEMPTY._serialized_end=789
  _TSERVERSTATUS._serialized_start=791
  _TSERVERSTATUS._serialized_end=869
  _TQUERYREQUEST._serialized_start=871
  _TQUERYREQUEST._serialized_end=973
  _TQUERYRESULT._serialized_start=975
  _TQUERYRESULT._serialized_end=1086
  _TRENDERREQUEST._serialized_start=1088
  _TRENDERREQUEST._serialized_end=1189
  _TRENDERRESULT._serialized_start=1191
  _TRENDERRESULT._serialized_end=1310
  _TVALIDATEREQUEST._serialized_start=1312
  _TVALIDATEREQUEST._serialized_end=1362
  _TTABLEDESCRIPTOR._serialized_start=1364
  _TTABLEDESCRIPTOR._serialized_end=1418
  _TTABLESRESPONSE._serialized_start=1420
  _TTABLESRESPONSE._serialized_end=1453
  _TTABLEREQUEST._serialized_start=1455
  _TTABLEREQUEST._serialized_end=1507
  _TDBINFO._serialized_start=1509
  _TDBINFO._serialized_end=1553
  _TDATABASESRESPONSE._serialized_start=1555
  _TDATABASESRESPONSE._serialized_end=1609
  _TPIXEL._serialized_start=1611
  _TPIXEL._serialized_end=1641
  _TCOLUMNNAMES._serialized_start=1643
  _TCOLUMNNAMES._serialized_end=1672
  _TPIXELREQUEST._serialized_start=1675
  _TPIXELREQUEST._serialized_end=1954
  _TPIXELREQUEST_TABLECOLNAMESENTRY._serialized_start=1882
  _TPIXELREQUEST_TABLECOLNAMESENTRY._serialized_end=1954
  _TPIXELTABLEROWRESULT._serialized_start=1957
  _TPIXELTABLEROWRESULT._serialized_end=2099
  _TPIXELRESULT._serialized_start=2101
  _TPIXELRESULT._serialized_end=2205
  _MAPD._serialized_start=2208
  _MAPD._serialized_end=2813
# @@protoc_insertion_point(module_scope)
